"""Tests for process matching."""

from __future__ import annotations

import os

from graceful_shutdown.matcher import Matcher, MatchMode, select_processes
from graceful_shutdown.options import Options
from graceful_shutdown.patterns import parse_patterns
from tests.helpers.fake_processes import make_record


def _matcher(*sources: str, mode: MatchMode = MatchMode.BASENAME, owner_id=None) -> Matcher:
    return Matcher(parse_patterns(sources), mode, owner_id)


class TestMatcherSubject:
    """Tests for subject selection."""

    def test_basename_mode_uses_short_name(self) -> None:
        record = make_record(10, "firefox-dev", "/usr/bin/firefox-dev --new-window")

        assert _matcher("firefox").is_match(record)
        assert not _matcher("^firefox$").is_match(record)
        assert not _matcher("/usr/bin/").is_match(record)

    def test_anchored_pattern_selects_exact_name(self) -> None:
        assert _matcher("^firefox$").is_match(make_record(11, "firefox", "/usr/lib/firefox/firefox"))

    def test_whole_command_mode_uses_cmdline(self) -> None:
        record = make_record(12, "electron", "/usr/lib/electron /opt/yakyak/app")

        assert _matcher("/electron .*yakyak/app$", mode=MatchMode.COMMANDLINE).is_match(record)
        assert not _matcher("/electron .*yakyak/app$").is_match(record)

    def test_anchoring_excludes_zygote_children(self) -> None:
        matcher = _matcher("/spotify( --force-device|$)", mode=MatchMode.COMMANDLINE)
        main = make_record(20, "spotify", "/usr/share/spotify/spotify")
        forced = make_record(21, "spotify", "/usr/share/spotify/spotify --force-device-scale-factor=2")
        zygote = make_record(22, "spotify", "/usr/share/spotify/spotify --type=zygote --no-sandbox")

        assert matcher.is_match(main)
        assert matcher.is_match(forced)
        assert not matcher.is_match(zygote)

    def test_any_pattern_selects(self) -> None:
        matcher = _matcher("^vim$", "^man$")

        assert matcher.is_match(make_record(30, "man"))
        assert not matcher.is_match(make_record(31, "less"))

    def test_empty_pattern_set_matches_nothing(self) -> None:
        assert not Matcher([]).is_match(make_record(32, "anything"))


class TestOwnerFilter:
    """Tests for the owner filter."""

    def test_rejects_other_owners_regardless_of_pattern(self) -> None:
        matcher = _matcher(".*", owner_id=1000)

        assert not matcher.is_match(make_record(40, "bash", owner_id=0))
        assert matcher.is_match(make_record(41, "bash", owner_id=1000))

    def test_disabled_filter_matches_all_owners(self) -> None:
        assert _matcher("bash").is_match(make_record(42, "bash", owner_id=0))

    def test_from_options_carries_filter_and_mode(self) -> None:
        options = Options(
            patterns=tuple(parse_patterns(["app$"])),
            match_mode=MatchMode.COMMANDLINE,
            owner_id=1000,
        )

        matcher = Matcher.from_options(options)

        assert matcher.mode is MatchMode.COMMANDLINE
        assert matcher.owner_id == 1000
        assert matcher.is_match(make_record(43, "node", "node app", owner_id=1000))


class TestSelectProcesses:
    """Tests for select_processes."""

    def test_keeps_snapshot_order(self) -> None:
        records = [make_record(3, "man"), make_record(1, "vim"), make_record(2, "man")]

        selected = select_processes(_matcher("^man$"), records, exclude_pid=-1)

        assert [record.pid for record in selected] == [3, 2]

    def test_excludes_current_process_by_default(self) -> None:
        records = [make_record(os.getpid(), "python"), make_record(os.getpid() + 1, "python")]

        selected = select_processes(_matcher("python"), records)

        assert [record.pid for record in selected] == [os.getpid() + 1]
