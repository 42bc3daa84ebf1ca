import unittest

from flexmock import flexmock

from minitos import cli
from minitos.connection import Connection
from minitos.exceptions import ConfigError, TOSError
from minitos.operations.listing_requests import ListRequest

ENV = {
    "TOS_REGION": "cn-shanghai",
    "TOS_ENDPOINT": "tos-cn-shanghai.volces.com",
    "TOS_ACCESS_KEY_ID": "ak",
    "TOS_ACCESS_KEY_SECRET": "sk",
}


class TestParseArgs(unittest.TestCase):
    def test_defaults(self):
        args = cli.parse_args(["update-cache-control"])
        self.assertEqual(args.command, "update-cache-control")
        self.assertIsNone(args.bucket)
        self.assertIsNone(args.prefix)
        self.assertEqual(args.cache_control, cli.ONE_YEAR_CACHE)
        self.assertEqual(args.delay, 0.05)
        self.assertFalse(args.verbose)
        self.assertFalse(args.dry_run)
        self.assertEqual(args.keys, [])

    def test_options(self):
        args = cli.parse_args(
            ["-v", "update-cache-control", "-b", "bkt", "-p", "img/",
             "--cache-control", "no-cache", "--delay", "0", "--dry-run", "a.txt", "b.txt"]
        )
        self.assertTrue(args.verbose)
        self.assertEqual(args.bucket, "bkt")
        self.assertEqual(args.prefix, "img/")
        self.assertEqual(args.cache_control, "no-cache")
        self.assertEqual(args.delay, 0.0)
        self.assertTrue(args.dry_run)
        self.assertEqual(args.keys, ["a.txt", "b.txt"])

    def test_command_required(self):
        with self.assertRaises(SystemExit):
            cli.parse_args([])


class TestUpdateCacheControl(unittest.TestCase):
    def setUp(self):
        self.conn = Connection.from_env(ENV)
        flexmock(cli.time).should_receive("sleep")

    def test_counts_failures_and_continues(self):
        flexmock(self.conn).should_receive("update_metadata").with_args(
            "a", "bkt", cache_control="no-cache"
        ).once()
        flexmock(self.conn).should_receive("update_metadata").with_args(
            "b", "bkt", cache_control="no-cache"
        ).and_raise(TOSError("update object metadata in TOS", 403, "denied")).once()
        flexmock(self.conn).should_receive("update_metadata").with_args(
            "c", "bkt", cache_control="no-cache"
        ).once()

        result = cli.update_cache_control(self.conn, "bkt", ["a", "b", "c"], "no-cache")
        self.assertEqual(result, (2, 1))


class TestMain(unittest.TestCase):
    def setUp(self):
        self.conn = Connection.from_env(ENV)
        flexmock(cli.time).should_receive("sleep")

    def test_missing_configuration(self):
        flexmock(Connection).should_receive("from_env").and_raise(ConfigError("missing"))
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 1)

    def test_missing_bucket(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        self.assertEqual(cli.main(["update-cache-control"]), 1)

    def test_success(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(self.conn).should_receive("list_all").with_args("bkt", prefix=None).and_return(
            iter([{"key": "a"}, {"key": "b"}])
        )
        flexmock(self.conn).should_receive("update_metadata").times(2)
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 0)

    def test_failed_update(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(self.conn).should_receive("list_all").and_return(iter([{"key": "a"}]))
        flexmock(self.conn).should_receive("update_metadata").and_raise(
            TOSError("update object metadata in TOS", 500, "boom")
        )
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 1)

    def test_listing_failure(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(self.conn).should_receive("list_all").and_raise(
            TOSError("list objects in TOS", 403, "denied")
        )
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 1)

    def test_unparseable_listing_body(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(ListRequest).should_receive("_make_request").and_return(
            flexmock(ok=True, status_code=200, content=b"<html>oops")
        )
        flexmock(self.conn).should_receive("update_metadata").never()
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 1)

    def test_listing_body_not_an_object(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(ListRequest).should_receive("_make_request").and_return(
            flexmock(ok=True, status_code=200, content=b"[1, 2]")
        )
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 1)

    def test_no_objects_found(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(self.conn).should_receive("list_all").and_return(iter([]))
        flexmock(self.conn).should_receive("update_metadata").never()
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt"]), 0)

    def test_dry_run_lists_without_updating(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(self.conn).should_receive("list_all").and_return(
            iter([{"key": "a"}, {"key": "b"}])
        ).once()
        flexmock(self.conn).should_receive("update_metadata").never()
        self.assertEqual(cli.main(["update-cache-control", "-b", "bkt", "--dry-run"]), 0)

    def test_explicit_keys_skip_listing(self):
        flexmock(Connection).should_receive("from_env").and_return(self.conn)
        flexmock(self.conn).should_receive("list_all").never()
        flexmock(self.conn).should_receive("update_metadata").with_args(
            "x.txt", "bkt", cache_control=cli.ONE_YEAR_CACHE
        ).once()
        flexmock(self.conn).should_receive("update_metadata").with_args(
            "y.txt", "bkt", cache_control=cli.ONE_YEAR_CACHE
        ).once()
        self.assertEqual(
            cli.main(["update-cache-control", "-b", "bkt", "x.txt", "y.txt"]), 0
        )
