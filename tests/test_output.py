"""Tests for the stdout/exit-code contract used by the shell wrapper."""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ccd.controller import Outcome, Phase
from ccd.errors import EXIT_NO_SELECTION, EXIT_OK, NoMatches, StoreWriteFailure
from ccd.frequency import FrequencyStore
from ccd.output import emit_path, finish_interactive, pick_top, run_direct

from test_session import FakeSource


class InteractiveOutcomeTests(unittest.TestCase):
    def test_confirmed_prints_exactly_the_path(self) -> None:
        out = io.StringIO()
        code = finish_interactive(Outcome(Phase.CONFIRMED, "/srv/app"), stream=out)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.getvalue(), "/srv/app\n")

    def test_cancelled_prints_nothing(self) -> None:
        out = io.StringIO()
        self.assertEqual(finish_interactive(Outcome(Phase.CANCELLED), stream=out), EXIT_NO_SELECTION)
        self.assertEqual(out.getvalue(), "")

    def test_missing_outcome_counts_as_no_selection(self) -> None:
        out = io.StringIO()
        self.assertEqual(finish_interactive(None, stream=out), EXIT_NO_SELECTION)
        self.assertEqual(out.getvalue(), "")

    def test_store_error_is_logged_but_path_still_emitted(self) -> None:
        out = io.StringIO()
        with self.assertLogs("ccd.output", level="WARNING") as logs:
            code = finish_interactive(
                Outcome(Phase.CONFIRMED, "/srv/app"),
                StoreWriteFailure("cannot write /home/u/.ccd_frequency"),
                stream=out,
            )
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.getvalue(), "/srv/app\n")
        self.assertIn("usage count not saved", logs.output[0])

    def test_emit_path_defaults_to_stdout(self) -> None:
        out = io.StringIO()
        with mock.patch("sys.stdout", out):
            emit_path("/x")
        self.assertEqual(out.getvalue(), "/x\n")


class DirectModeTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.store_path = Path(tmp.name) / "freq"
        self.store_path.write_text("5\t/home/u/tmp-work\n", encoding="utf-8")
        self.store = FrequencyStore(self.store_path).load()

    def test_prints_top_match_without_rewarding_it(self) -> None:
        source = FakeSource({"tmp": ["/tmp"]})
        before = self.store_path.read_text(encoding="utf-8")
        out = io.StringIO()

        code = run_direct("tmp", source, self.store, stream=out, is_dir=lambda path: False)

        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.getvalue(), "/tmp\n")
        self.assertEqual(dict(self.store.entries()), {"/home/u/tmp-work": 5})
        self.assertEqual(self.store_path.read_text(encoding="utf-8"), before)

    def test_frequent_stored_directory_outranks_index_hit(self) -> None:
        source = FakeSource({"tmp": ["/tmp"]})
        top, found, files_filtered = pick_top("tmp", source, self.store, is_dir=lambda path: True)
        self.assertEqual((top.path, top.count), ("/home/u/tmp-work", 5))
        self.assertEqual((found, files_filtered), (2, 0))

    def test_no_match_raises_and_prints_nothing(self) -> None:
        out = io.StringIO()
        with self.assertRaises(NoMatches) as ctx:
            run_direct("nothing-here", FakeSource({}), self.store, stream=out)
        self.assertEqual(out.getvalue(), "")
        self.assertEqual(ctx.exception.exit_code, EXIT_NO_SELECTION)

    def test_progress_goes_to_logging_not_stdout(self) -> None:
        source = FakeSource({"tmp": ["/tmp"]}, files_filtered=3)
        out = io.StringIO()
        with self.assertLogs("ccd.output", level="INFO") as logs:
            run_direct("tmp", source, self.store, stream=out, is_dir=lambda path: False)
        self.assertEqual(out.getvalue(), "/tmp\n")
        self.assertIn("Searching for directories matching: tmp", logs.output[0])
        self.assertIn("3 matching files not shown", logs.output[1])


if __name__ == "__main__":
    unittest.main()
