import os
import pathlib
import sys
import tempfile
import unittest
from unittest import mock

PACKAGE_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from xmlresolve.exceptions import ResourceAccessDeniedError, ResourceNotFoundError
from xmlresolve.loader import ResourceLoader
from xmlresolve.resources import (
    ByteArrayResource,
    FileSystemResource,
    ModuleResource,
    UrlResource,
)


class ResolvePathClassificationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.loader = ResourceLoader(module_roots=[])

    def test_absolute_posix_path_is_filesystem_resource(self):
        resource = self.loader.resolve_path("/Users/someone/Documents/spark.txt")
        self.assertIsInstance(resource, FileSystemResource)
        self.assertEqual(resource.filename, "spark.txt")

    def test_drive_letter_path_is_filesystem_resource(self):
        self.assertIsInstance(self.loader.resolve_path("D:/Users/someone/spark.txt"), FileSystemResource)
        self.assertIsInstance(self.loader.resolve_path("C:\\configs\\beans.xml"), FileSystemResource)

    def test_url_schemes_are_url_resources(self):
        for location in (
            "http://www.example.org",
            "https://www.example.org/dtd/spring-beans-2.0.dtd",
            "file:/Users/someone/Documents/spark.txt",
            "HTTPS://www.example.org/upper.dtd",
            "s3://bucket/dtd/spring-beans.dtd",
        ):
            with self.subTest(location=location):
                self.assertIsInstance(self.loader.resolve_path(location), UrlResource)

    def test_classpath_prefix_is_module_resource(self):
        resource = self.loader.resolve_path("classpath:/org/example/spring-beans.dtd")
        self.assertIsInstance(resource, ModuleResource)
        self.assertEqual(resource.name, "org/example/spring-beans.dtd")

    def test_bare_and_unknown_scheme_names_are_module_resources(self):
        self.assertIsInstance(self.loader.resolve_path("spring-beans.dtd"), ModuleResource)
        self.assertIsInstance(self.loader.resolve_path("dtd/spring-beans.dtd"), ModuleResource)
        self.assertIsInstance(self.loader.resolve_path("urn:example:beans"), ModuleResource)

    def test_classification_does_not_depend_on_filesystem(self):
        with tempfile.TemporaryDirectory() as tmp:
            present = pathlib.Path(tmp, "here.dtd")
            present.write_bytes(b"")
            self.assertIsInstance(self.loader.resolve_path(str(present)), FileSystemResource)
            self.assertIsInstance(self.loader.resolve_path(str(present) + ".missing"), FileSystemResource)

    def test_empty_location_rejected(self):
        with self.assertRaises(ValueError):
            self.loader.resolve_path("")


class ModuleResourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.first = pathlib.Path(self._tmp.name, "first")
        self.second = pathlib.Path(self._tmp.name, "second")
        self.first.mkdir()
        self.second.mkdir()
        self.loader = ResourceLoader(module_roots=[self.first, self.second])

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_existence_reflects_presence_among_roots(self):
        resource = self.loader.resolve_path("dtd/spring-beans.dtd")
        self.assertFalse(resource.exists())

        target = self.second / "dtd" / "spring-beans.dtd"
        target.parent.mkdir()
        target.write_bytes(b"<!ELEMENT beans EMPTY>")
        self.assertTrue(resource.exists())
        with self.loader.open(resource) as stream:
            self.assertEqual(stream.read(), b"<!ELEMENT beans EMPTY>")

    def test_first_root_wins(self):
        (self.first / "shared.dtd").write_bytes(b"first")
        (self.second / "shared.dtd").write_bytes(b"second")
        resource = self.loader.resolve_path("shared.dtd")
        self.assertEqual(resource.read_bytes(), b"first")

    def test_missing_resource_fails_only_on_open(self):
        resource = self.loader.resolve_path("absent.dtd")
        self.assertFalse(resource.exists())
        with self.assertRaises(ResourceNotFoundError):
            self.loader.open(resource)

    def test_lookup_ignores_working_directory(self):
        (pathlib.Path(self._tmp.name) / "cwd-only.dtd").write_bytes(b"cwd")
        previous = os.getcwd()
        os.chdir(self._tmp.name)
        try:
            self.assertFalse(self.loader.resolve_path("cwd-only.dtd").exists())
        finally:
            os.chdir(previous)

    def test_leading_dots_in_filename_are_not_traversal(self):
        (self.first / "..beans.dtd").write_bytes(b"dotted")
        resource = ModuleResource("..beans.dtd", roots=[self.first])
        self.assertTrue(resource.exists())
        self.assertEqual(resource.read_bytes(), b"dotted")

    def test_parent_traversal_never_exists(self):
        (pathlib.Path(self._tmp.name) / "outside.dtd").write_bytes(b"outside")
        resource = ModuleResource("../outside.dtd", roots=[self.first])
        self.assertFalse(resource.exists())

    def test_create_relative_keeps_roots(self):
        (self.first / "dtd").mkdir()
        (self.first / "dtd" / "other.dtd").write_bytes(b"other")
        resource = self.loader.resolve_path("dtd/spring-beans.dtd").create_relative("other.dtd")
        self.assertEqual(resource.name, "dtd/other.dtd")
        self.assertEqual(resource.read_bytes(), b"other")

    def test_anchored_resource_finds_bundled_dtd(self):
        resource = self.loader.module_resource("spring-beans.dtd", anchor="xmlresolve")
        self.assertTrue(resource.exists())
        self.assertIn("xmlresolve/spring-beans.dtd", resource.description)
        self.assertIn(b"<!ELEMENT beans", resource.read_bytes())

    def test_unknown_anchor_is_not_found(self):
        resource = ModuleResource("spring-beans.dtd", anchor="xmlresolve_no_such_package")
        self.assertFalse(resource.exists())
        with self.assertRaises(ResourceNotFoundError):
            resource.open()


class FileSystemResourceTests(unittest.TestCase):
    def test_reads_and_describes_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp, "beans.dtd")
            path.write_bytes(b"payload")
            resource = FileSystemResource(path)
            self.assertTrue(resource.exists())
            self.assertEqual(resource.read_bytes(), b"payload")
            self.assertEqual(resource.description, f"file [{path}]")
            self.assertEqual(resource.create_relative("x.dtd"), FileSystemResource(pathlib.Path(tmp, "x.dtd")))

    def test_missing_file_raises_not_found(self):
        with tempfile.TemporaryDirectory() as tmp:
            resource = FileSystemResource(pathlib.Path(tmp, "missing.dtd"))
            self.assertFalse(resource.exists())
            with self.assertRaises(ResourceNotFoundError):
                resource.open()

    def test_permission_error_raises_access_denied(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp, "locked.dtd")
            path.write_bytes(b"")
            resource = FileSystemResource(path)
            with mock.patch.object(pathlib.Path, "open", side_effect=PermissionError(13, "denied")):
                with self.assertRaises(ResourceAccessDeniedError) as ctx:
                    resource.open()
            self.assertIsInstance(ctx.exception.__cause__, PermissionError)


class ByteArrayResourceTests(unittest.TestCase):
    def test_exposes_bytes_under_description(self):
        resource = ByteArrayResource(b"<!ELEMENT a EMPTY>", "spring-beans.dtd copy")
        self.assertTrue(resource.exists())
        self.assertEqual(resource.read_bytes(), b"<!ELEMENT a EMPTY>")
        self.assertEqual(resource.description, "byte array [spring-beans.dtd copy]")


if __name__ == "__main__":
    unittest.main()
