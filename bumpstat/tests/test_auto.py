"""Tests for init() and the global client."""

from __future__ import annotations

import logging
import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import bumpstat
from bumpstat import OTelClient, PrefixClient, get_client, init, set_global_client, shutdown
from bumpstat.errors import ConfigError


class TestGlobalClient(unittest.TestCase):

    def tearDown(self):
        set_global_client(None)

    def test_none_when_not_set(self):
        set_global_client(None)
        assert get_client() is None

    def test_set_and_get(self):
        client = MagicMock()
        set_global_client(client)
        assert get_client() is client

    def test_helpers_accept_unset_global(self):
        set_global_client(None)
        bumpstat.bump_sum(get_client(), "k", 1.0)  # Should not raise
        bumpstat.bump_time(get_client(), "k").end()


class TestInit(unittest.TestCase):

    def setUp(self):
        env = {k: v for k, v in os.environ.items() if not k.startswith("BUMPSTAT_")}
        env_patch = patch.dict(os.environ, env, clear=True)
        env_patch.start()
        self.addCleanup(env_patch.stop)
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.config_file = os.path.join(tmpdir.name, "missing.toml")
        self.meter = MagicMock()

    def tearDown(self):
        shutdown()

    def test_init_without_prefixes(self):
        client = init(config_file=self.config_file, meter=self.meter)
        assert isinstance(client, OTelClient)
        assert client.meter is self.meter
        assert get_client() is client

    def test_init_with_prefixes(self):
        client = init(config_file=self.config_file, meter=self.meter, prefixes=["svc.", "env.prod."])
        assert isinstance(client, PrefixClient)
        assert client.prefixes == ("svc.", "env.prod.")
        assert isinstance(client.client, OTelClient)

    def test_init_disabled(self):
        set_global_client(MagicMock())
        client = init(config_file=self.config_file, meter=self.meter, enabled=False)
        assert client is None
        assert get_client() is None

    def test_init_sample_rate(self):
        client = init(config_file=self.config_file, meter=self.meter, sample_rate=0.5)
        assert client.sample_rate == 0.5

    def test_init_unknown_keyword(self):
        with self.assertRaises(TypeError):
            init(config_file=self.config_file, meter=self.meter, endpoint="http://localhost")

    def test_init_invalid_config(self):
        with self.assertRaises(ConfigError):
            init(config_file=self.config_file, meter=self.meter, sample_rate=3.0)
        assert get_client() is None

    def test_init_debug_sets_logger_level(self):
        logger = logging.getLogger("bumpstat")
        previous = logger.level
        self.addCleanup(logger.setLevel, previous)
        init(config_file=self.config_file, meter=self.meter, debug=True)
        assert logger.level == logging.DEBUG

    def test_shutdown_clears_client(self):
        init(config_file=self.config_file, meter=self.meter)
        shutdown()
        assert get_client() is None


if __name__ == "__main__":
    unittest.main()
