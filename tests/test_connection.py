import unittest

from flexmock import flexmock

from minitos import Connection, ConfigError, ListObjectsResult
from minitos.auth import TOSAuth
from minitos.operations.listing_requests import ListAllRequest, ListRequest
from minitos.operations.object_requests import (
    CopyRequest,
    DeleteRequest,
    ExistsRequest,
    GetRequest,
    UpdateMetadataRequest,
    UploadRequest,
)

ENV = {
    "TOS_REGION": "cn-shanghai",
    "TOS_ENDPOINT": "tos-cn-shanghai.volces.com",
    "TOS_ACCESS_KEY_ID": "ak",
    "TOS_ACCESS_KEY_SECRET": "sk",
}


class TestConfiguration(unittest.TestCase):
    def test_from_env(self):
        conn = Connection.from_env(dict(ENV, TOS_BUCKET="my-bucket"))
        self.assertEqual(conn.region, "cn-shanghai")
        self.assertEqual(conn.endpoint, "tos-cn-shanghai.volces.com")
        self.assertEqual(conn.default_bucket, "my-bucket")
        self.assertIsInstance(conn.auth, TOSAuth)
        self.assertEqual(conn.auth.access_key, "ak")

    def test_from_env_without_bucket(self):
        conn = Connection.from_env(ENV, tls=False)
        self.assertIsNone(conn.default_bucket)
        self.assertFalse(conn.tls)

    def test_from_env_reports_every_missing_variable(self):
        with self.assertRaises(ConfigError) as ctx:
            Connection.from_env({"TOS_REGION": "cn-shanghai", "TOS_ENDPOINT": ""})
        message = str(ctx.exception)
        self.assertIn("TOS_ENDPOINT", message)
        self.assertIn("TOS_ACCESS_KEY_ID", message)
        self.assertIn("TOS_ACCESS_KEY_SECRET", message)
        self.assertNotIn("TOS_REGION", message)

    def test_repr_has_no_secret(self):
        conn = Connection("ak", "super-secret", "cn-beijing", "tos-cn-beijing.volces.com")
        self.assertNotIn("super-secret", repr(conn))

    def test_bucket_resolution(self):
        conn = Connection("ak", "sk", "r", "e", default_bucket="default")
        self.assertEqual(conn.bucket(None), "default")
        self.assertEqual(conn.bucket("other"), "other")
        with self.assertRaises(ValueError):
            Connection("ak", "sk", "r", "e").bucket(None)


class TestOperations(unittest.TestCase):
    def setUp(self):
        self.conn = Connection("ak", "sk", "cn-beijing", "tos-cn-beijing.volces.com",
                               default_bucket="bucket")

    def expect_run(self, request_class, result=None, **attrs):
        def check(request):
            self.assertIsInstance(request, request_class)
            for name, value in attrs.items():
                self.assertEqual(getattr(request, name), value)
            return True

        flexmock(self.conn).should_receive("run").replace_with(
            lambda request: check(request) and result
        ).once()

    def test_upload(self):
        self.expect_run(UploadRequest, key="k", bucket="bucket", content_type="text/plain",
                        extra_headers={"X-A": "1"})
        self.conn.upload("k", b"data", content_type="text/plain", headers={"X-A": "1"})

    def test_download(self):
        self.expect_run(GetRequest, key="k", bucket="other")
        self.conn.download("k", "other")

    def test_delete(self):
        self.expect_run(DeleteRequest, key="k", bucket="bucket")
        self.conn.delete("k")

    def test_exists(self):
        self.expect_run(ExistsRequest, result=True, key="k")
        self.assertTrue(self.conn.exists("k"))

    def test_copy(self):
        self.expect_run(CopyRequest, from_key="a", from_bucket="src", to_key="b",
                        to_bucket="bucket", metadata_directive="COPY")
        self.conn.copy("a", "src", "b", metadata_directive="COPY")

    def test_update_metadata(self):
        self.expect_run(UpdateMetadataRequest, from_key="k", to_key="k",
                        cache_control="no-cache", metadata_directive="REPLACE")
        self.conn.update_metadata("k", cache_control="no-cache")

    def test_list(self):
        page = ListObjectsResult([], [], False, None, 0)
        self.expect_run(ListRequest, result=page, bucket="bucket")
        self.assertEqual(self.conn.list(prefix="p/", max_keys=10), page)

    def test_list_all(self):
        self.expect_run(ListAllRequest, result=iter([]), bucket="bucket", prefix="p/")
        self.assertEqual(list(self.conn.list_all(prefix="p/")), [])

    def test_missing_bucket(self):
        conn = Connection("ak", "sk", "r", "e")
        with self.assertRaises(ValueError):
            conn.delete("k")
