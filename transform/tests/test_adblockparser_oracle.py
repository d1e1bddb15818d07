import unittest

from filterlist.hosts_compiler import HostsCompiler


def _import_rules():
    try:
        from adblockparser import AdblockRules
    except Exception as e:
        raise unittest.SkipTest(f"adblockparser not available: {e}")
    return AdblockRules


class TestAgainstAdblockparser(unittest.TestCase):
    def test_compiled_hostnames_are_blocked_by_the_rules(self):
        AdblockRules = _import_rules()

        lines = [
            "||ads.example.com^",
            "||tracker.example.net^",
            "example.com##.banner",
            "/banner/*/img^",
        ]
        rules = AdblockRules(lines)
        hostnames = HostsCompiler(strict=True).feed_all(lines).hostnames()

        self.assertEqual(hostnames, ["ads.example.com", "tracker.example.net"])
        for hostname in hostnames:
            self.assertTrue(rules.should_block(f"http://{hostname}/"))

    def test_excepted_hostnames_are_allowed_by_the_rules(self):
        AdblockRules = _import_rules()

        lines = ["||ads.example.com^", "@@||ads.example.com^"]
        rules = AdblockRules(lines)
        compiler = HostsCompiler().feed_all(lines)

        self.assertEqual(compiler.hostnames(), [])
        self.assertFalse(rules.should_block("http://ads.example.com/"))


if __name__ == "__main__":
    unittest.main()
