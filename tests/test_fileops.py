import shutil
import tempfile
import unittest
from pathlib import Path

from iconforge.config import Layout
from iconforge.errors import InputIconNotFound
from iconforge.fileops import RunWorkspace, backup, find_input_icon, move, restore

from tests.helpers import write


class FileOpsTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)


class TestFindInputIcon(FileOpsTestCase):

    def test_priority_order(self):
        assets = self.tmp / "assets"
        write(assets / "icon.jpeg", "x")
        self.assertEqual(find_input_icon(assets).name, "icon.jpeg")
        write(assets / "icon.jpg", "x")
        self.assertEqual(find_input_icon(assets).name, "icon.jpg")
        write(assets / "icon.png", "x")
        self.assertEqual(find_input_icon(assets).name, "icon.png")
        write(assets / "icon.svg", "x")
        self.assertEqual(find_input_icon(assets).name, "icon.svg")

    def test_missing_icon_raises(self):
        (self.tmp / "assets").mkdir()
        with self.assertRaises(InputIconNotFound) as ctx:
            find_input_icon(self.tmp / "assets")
        self.assertIn("icon.svg, icon.png, icon.jpg, icon.jpeg", str(ctx.exception))

    def test_directory_named_like_icon_is_ignored(self):
        (self.tmp / "assets" / "icon.svg").mkdir(parents=True)
        write(self.tmp / "assets" / "icon.png", "x")
        self.assertEqual(find_input_icon(self.tmp / "assets").name, "icon.png")


class TestBackupRestore(FileOpsTestCase):

    def test_round_trip_overwrites_shared_and_keeps_extras(self):
        live = self.tmp / "live"
        for name in ("a", "b", "c"):
            write(live / name, f"orig-{name}")
        saved = self.tmp / "backup" / "icons"
        self.assertTrue(backup(live, saved))

        write(live / "a", "modified")
        write(live / "d", "new")
        self.assertTrue(restore(saved, live))

        self.assertEqual((live / "a").read_text(), "orig-a")
        self.assertEqual((live / "b").read_text(), "orig-b")
        self.assertEqual((live / "c").read_text(), "orig-c")
        self.assertEqual((live / "d").read_text(), "new")

    def test_restore_recreates_deleted_tree(self):
        live = self.tmp / "live"
        write(live / "sub" / "x.png", "x")
        saved = self.tmp / "bk"
        backup(live, saved)
        shutil.rmtree(live)
        restore(saved, live)
        self.assertEqual((live / "sub" / "x.png").read_text(), "x")

    def test_exclude_applies_to_top_level_only(self):
        live = self.tmp / "live"
        write(live / "skip.icns", "top")
        write(live / "nested" / "skip.icns", "nested")
        write(live / "keep.png", "k")
        saved = self.tmp / "bk"
        backup(live, saved, exclude=("skip.icns",))
        self.assertFalse((saved / "skip.icns").exists())
        self.assertTrue((saved / "nested" / "skip.icns").exists())
        self.assertTrue((saved / "keep.png").exists())

    def test_missing_paths_are_noops(self):
        self.assertFalse(backup(self.tmp / "nope", self.tmp / "bk"))
        self.assertFalse((self.tmp / "bk").exists())
        self.assertFalse(restore(self.tmp / "nope", self.tmp / "live"))
        self.assertFalse((self.tmp / "live").exists())

    def test_single_file(self):
        f = write(self.tmp / "one.txt", "1")
        backup(f, self.tmp / "bk" / "one.txt")
        f.write_text("2")
        restore(self.tmp / "bk" / "one.txt", f)
        self.assertEqual(f.read_text(), "1")

    def test_move_creates_parent(self):
        src = write(self.tmp / "a.icns", "icns")
        dst = move(src, self.tmp / "deep" / "b.icns")
        self.assertFalse(src.exists())
        self.assertEqual(dst.read_text(), "icns")


class TestRunWorkspace(FileOpsTestCase):

    def setUp(self):
        super().setUp()
        self.layout = Layout(self.tmp)

    def test_temp_root_removed_on_success(self):
        with RunWorkspace(self.layout) as ws:
            self.assertTrue(ws.backups.is_dir())
            write(ws.temp_path("icon-ios.png"), "x")
        self.assertFalse(self.layout.temp.exists())
        self.assertFalse(self.layout.recovery.exists())

    def test_stale_temp_root_is_replaced(self):
        write(self.layout.temp / "leftover.png", "x")
        with RunWorkspace(self.layout):
            self.assertFalse((self.layout.temp / "leftover.png").exists())

    def test_failure_without_backups_leaves_nothing(self):
        with self.assertRaises(RuntimeError):
            with RunWorkspace(self.layout):
                raise RuntimeError("boom")
        self.assertFalse(self.layout.temp.exists())
        self.assertFalse(self.layout.recovery.exists())

    def test_failure_preserves_backups(self):
        lines = []
        with self.assertRaises(RuntimeError):
            with RunWorkspace(self.layout, logfn=lines.append) as ws:
                write(ws.backup_path("ios-icons") / "AppIcon.png", "orig")
                raise RuntimeError("boom")
        self.assertFalse(self.layout.temp.exists())
        self.assertEqual((self.layout.recovery / "ios-icons" / "AppIcon.png").read_text(), "orig")
        self.assertTrue(any("preserved" in ln for ln in lines))

    def test_existing_recovery_is_not_overwritten(self):
        write(self.layout.recovery / "ios-icons" / "AppIcon.png", "older")
        lines = []
        with self.assertRaises(RuntimeError):
            with RunWorkspace(self.layout, logfn=lines.append) as ws:
                write(ws.backup_path("ios-icons") / "AppIcon.png", "newer")
                raise RuntimeError("boom")
        self.assertEqual((self.layout.recovery / "ios-icons" / "AppIcon.png").read_text(), "older")
        self.assertTrue(any(ln.startswith("Unrestored recovery still at") for ln in lines))


if __name__ == "__main__":
    unittest.main()
