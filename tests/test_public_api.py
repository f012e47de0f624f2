import unittest

import gdrivedav


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(gdrivedav, "DriveContext"))
        self.assertTrue(hasattr(gdrivedav, "DriveFileSystem"))
        self.assertTrue(hasattr(gdrivedav, "DavConfig"))
        self.assertTrue(hasattr(gdrivedav, "CallContext"))

        self.assertTrue(hasattr(gdrivedav, "ReadOnlyFile"))
        self.assertTrue(hasattr(gdrivedav, "WritableFile"))
        self.assertTrue(hasattr(gdrivedav, "FileMetadata"))

        self.assertTrue(hasattr(gdrivedav, "GDriveDavError"))
        self.assertTrue(hasattr(gdrivedav, "NotFoundError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(gdrivedav, "__all__"))
        self.assertIn("DriveFileSystem", gdrivedav.__all__)
        self.assertIn("GDriveDavError", gdrivedav.__all__)
        for name in gdrivedav.__all__:
            self.assertTrue(hasattr(gdrivedav, name), name)


if __name__ == "__main__":
    unittest.main()
