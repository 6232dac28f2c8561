"""Tests for the prefixing client and MultiEnder."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, call

from bumpstat import HookClient, MultiEnder, PrefixClient, prefix_client


class TestPrefixClient(unittest.TestCase):
    """Each bump is replayed once per prefix, in order."""

    def setUp(self):
        self.calls = []
        self.backend = HookClient(
            bump_avg_hook=lambda k, v, t: self.calls.append(("avg", k, v, t)),
            bump_sum_hook=lambda k, v, t: self.calls.append(("sum", k, v, t)),
            bump_histogram_hook=lambda k, v, t: self.calls.append(("histogram", k, v, t)),
        )

    def test_bump_sum_fans_out_in_order(self):
        client = prefix_client(["svc.", "env.prod."], self.backend)
        client.bump_sum("requests", 3.0)
        self.assertEqual(self.calls, [
            ("sum", "svc.requests", 3.0, ()),
            ("sum", "env.prod.requests", 3.0, ()),
        ])

    def test_bump_avg_passes_tags_unchanged(self):
        tags = ["b:2", "a:1"]
        client = PrefixClient(["x.", "y.", "z."], self.backend)
        client.bump_avg("latency", 1.5, tags)
        self.assertEqual([c[1] for c in self.calls], ["x.latency", "y.latency", "z.latency"])
        for _, _, value, passed in self.calls:
            self.assertEqual(value, 1.5)
            self.assertIs(passed, tags)

    def test_bump_histogram(self):
        client = PrefixClient(["a."], self.backend)
        client.bump_histogram("size", 10.0, ["kind:blob"])
        self.assertEqual(self.calls, [("histogram", "a.size", 10.0, ["kind:blob"])])

    def test_empty_prefixes_make_no_calls(self):
        backend = MagicMock()
        client = PrefixClient([], backend)
        client.bump_avg("k", 1.0)
        client.bump_sum("k", 1.0)
        client.bump_histogram("k", 1.0)
        ender = client.bump_time("k")
        ender.end()
        self.assertEqual(backend.mock_calls, [])
        self.assertEqual(len(ender), 0)

    def test_prefixes_are_copied(self):
        prefixes = ["a."]
        client = PrefixClient(prefixes, self.backend)
        prefixes.append("b.")
        client.bump_sum("k", 1.0)
        self.assertEqual(len(self.calls), 1)

    def test_bump_time_collects_enders(self):
        enders = [MagicMock(name="first"), MagicMock(name="second")]
        hook = MagicMock(side_effect=enders)
        client = PrefixClient(["a.", "b."], HookClient(bump_time_hook=hook))

        ender = client.bump_time("op", ["t:1"])

        self.assertIsInstance(ender, MultiEnder)
        self.assertEqual(hook.call_args_list, [call("a.op", ["t:1"]), call("b.op", ["t:1"])])
        self.assertEqual(ender.enders, tuple(enders))
        for e in enders:
            e.end.assert_not_called()
        ender.end()
        for e in enders:
            e.end.assert_called_once_with()

    def test_nested_prefix_clients(self):
        client = PrefixClient(["outer."], PrefixClient(["inner.", "other."], self.backend))
        client.bump_sum("k", 1.0)
        self.assertEqual([c[1] for c in self.calls], ["inner.outer.k", "other.outer.k"])


class TestMultiEnder(unittest.TestCase):
    """MultiEnder ends everything it holds, in order."""

    def test_ends_in_order(self):
        order = []
        enders = []
        for i in range(5):
            e = MagicMock()
            e.end.side_effect = lambda i=i: order.append(i)
            enders.append(e)
        MultiEnder(enders).end()
        self.assertEqual(order, [0, 1, 2, 3, 4])
        for e in enders:
            e.end.assert_called_once_with()

    def test_empty(self):
        MultiEnder().end()  # Should not raise

    def test_failure_does_not_stop_remaining(self):
        first = MagicMock()
        broken = MagicMock()
        broken.end.side_effect = RuntimeError("backend down")
        last = MagicMock()

        with self.assertLogs("bumpstat.prefix", level="WARNING"):
            MultiEnder([first, broken, last]).end()

        first.end.assert_called_once_with()
        broken.end.assert_called_once_with()
        last.end.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
