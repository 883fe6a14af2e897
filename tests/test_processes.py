import tempfile
import unittest
from pathlib import Path

from wblauncher import constants
from wblauncher.models import Resolution
from wblauncher.processes import ProcessTable, reconcile_running_instances

from tests.support import FakeProcess, FakeProcessList, make_session, make_settings


def _table(settings, procs):
    plist = FakeProcessList(procs)
    table = ProcessTable(
        settings,
        process_iter=plist.process_iter,
        wait_procs=plist.wait_procs,
        closer=FakeProcessList.close,
    )
    return table, plist


class RunningInstanceTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.settings = make_settings(self._td.name)

    def tearDown(self):
        self._td.cleanup()

    def test_only_known_names_with_versions(self):
        procs = [
            FakeProcess(10, "Workbench.exe", "/opt/Workbench 21.0/Workbench.exe"),
            FakeProcess(11, "notepad.exe", "/opt/notepad.exe"),
            FakeProcess(12, "WORKBENCHIDE.EXE", ""),
        ]
        table, _ = _table(self.settings, procs)
        found = table.running_instances()
        self.assertEqual([(i.pid, i.version) for i in found], [(10, "21.0"), (12, None)])
        self.assertTrue(table.any_alive())

    def test_nothing_running(self):
        table, _ = _table(self.settings, [FakeProcess(11, "notepad.exe")])
        self.assertFalse(table.any_alive())


class ReconcileTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.settings = make_settings(self._td.name)
        self.resolution = Resolution(
            executable=Path("/opt/Workbench 21.0/Workbench.exe"), version="21.0", reason="exact"
        )

    def tearDown(self):
        self._td.cleanup()

    def test_nothing_running_uses_resolution(self):
        table, plist = _table(self.settings, [])
        session = make_session()
        self.assertEqual(reconcile_running_instances(self.resolution, table, session), self.resolution.executable)
        self.assertEqual(plist.waits, [])
        self.assertEqual(session.sleeps, [])

    def test_matching_version_is_reused_untouched(self):
        same = FakeProcess(20, "Workbench.exe", "/srv/Workbench 21.0/Workbench.exe")
        other = FakeProcess(21, "Workbench.exe", "/srv/Workbench 19.0/Workbench.exe")
        table, plist = _table(self.settings, [other, same])
        exe = reconcile_running_instances(self.resolution, table, make_session())
        self.assertEqual(exe, Path("/srv/Workbench 21.0/Workbench.exe"))
        self.assertFalse(same.close_requested or same.killed)
        self.assertFalse(other.close_requested or other.killed)
        self.assertEqual(plist.waits, [])

    def test_mismatch_closes_everything(self):
        a = FakeProcess(30, "Workbench.exe", "/srv/Workbench 19.0/Workbench.exe")
        b = FakeProcess(31, "WorkbenchIDE.exe", "")
        table, plist = _table(self.settings, [a, b])
        session = make_session()
        exe = reconcile_running_instances(self.resolution, table, session)
        self.assertEqual(exe, self.resolution.executable)
        self.assertTrue(a.close_requested and b.close_requested)
        self.assertFalse(a.killed or b.killed)
        self.assertEqual(plist.waits[0][1], constants.CLOSE_TIMEOUT_SECONDS)
        self.assertEqual(session.sleeps, [constants.TERMINATE_SETTLE_SECONDS])

    def test_stubborn_process_is_killed_after_timeout(self):
        stubborn = FakeProcess(40, "Workbench.exe", "/srv/Workbench 19.0/Workbench.exe", survives_close=True)
        table, plist = _table(self.settings, [stubborn])
        reconcile_running_instances(self.resolution, table, make_session())
        self.assertTrue(stubborn.close_requested)
        self.assertTrue(stubborn.killed)
        self.assertEqual(len(plist.waits), 2)

    def test_unknown_target_version_closes_running(self):
        running = FakeProcess(50, "Workbench.exe", "")
        table, _ = _table(self.settings, [running])
        resolution = Resolution(executable=Path("/x/Workbench.exe"), version=None, reason="prompted")
        reconcile_running_instances(resolution, table, make_session())
        self.assertTrue(running.close_requested)


if __name__ == "__main__":
    unittest.main()
