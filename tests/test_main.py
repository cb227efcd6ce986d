"""Tests for the command line entry point, configuration and logging."""

import csv
import logging
import tempfile
import unittest
from pathlib import Path

import yaml

from configs import load_config, load_default_config, merge_configs
from faastrace.main import main, parse_args, build_config
from faastrace.utils.logger import setup_logger

TRACE = (
    "app,func,end_timestamp,duration\n"
    "a,f,0,0\n"
    "a,f,1,0\n"
    "a,f,70,0\n"
)


class RecordingHandler(logging.Handler):
    """Collects emitted log records."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestMain(unittest.TestCase):
    """Test cases for the CLI."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmpdir.name)
        self.trace = self.dir / "trace.csv"
        self.trace.write_text(TRACE)
        self.output = self.dir / "out.csv"

    def tearDown(self):
        self.tmpdir.cleanup()

    def read_output(self):
        with open(self.output, newline='') as f:
            return list(csv.reader(f))

    def test_azure2021_run(self):
        """Test an end-to-end run on a small trace."""
        code = main(["--wrapper", "azure2021", str(self.trace), str(self.output)])

        self.assertEqual(code, 0)
        self.assertEqual(self.read_output(), [
            ["FunctionName", "Time", "ColdstartFrom0", "PeriodicInvocation"],
            ["af", "0", "true", "false"],
            ["af", "70000", "true", "false"],
        ])

        with open(self.dir / "out_summary.yaml") as f:
            summary = yaml.safe_load(f)
        self.assertEqual(summary['cold_starts'], 2)
        self.assertEqual(summary['total_invocations'], 3)

    def test_verbose_enables_component_debug(self):
        """Test that --verbose reaches the component loggers."""
        package_logger = logging.getLogger("faastrace")
        handler = RecordingHandler()
        package_logger.addHandler(handler)
        try:
            code = main(["--wrapper", "azure2021", "--verbose",
                         str(self.trace), str(self.output)])
        finally:
            package_logger.removeHandler(handler)
            package_logger.setLevel(logging.INFO)

        self.assertEqual(code, 0)
        debug_sources = {r.name for r in handler.records if r.levelno == logging.DEBUG}
        self.assertIn("faastrace.ColdStartSimulator", debug_sources)
        self.assertIn("faastrace.PeriodicityClassifier", debug_sources)

    def test_component_loggers_inherit_level(self):
        """Test that component loggers follow the package logger level."""
        component = setup_logger("faastrace.ColdStartSimulator")
        package_logger = setup_logger("faastrace", verbose=True)
        try:
            self.assertEqual(component.level, logging.NOTSET)
            self.assertEqual(component.handlers, [])
            self.assertEqual(component.getEffectiveLevel(), logging.DEBUG)
        finally:
            package_logger.setLevel(logging.INFO)

    def test_keepalive_flag(self):
        """Test that a longer keep-alive removes the second cold start."""
        code = main(["--wrapper", "azure2021", "--keepalive", "120",
                     str(self.trace), str(self.output)])

        self.assertEqual(code, 0)
        self.assertEqual(len(self.read_output()), 2)

    def test_config_file(self):
        """Test that a YAML config overrides the defaults."""
        config_path = self.dir / "config.yaml"
        config_path.write_text("analysis:\n  keep_alive_seconds: 120\n")

        args = parse_args(["--wrapper", "azure2021", "--config", str(config_path),
                           str(self.trace), str(self.output)])
        config = build_config(args)

        self.assertEqual(config['analysis']['keep_alive_seconds'], 120)
        self.assertEqual(config['analysis']['tolerance_ms'], 100)
        self.assertEqual(config['trace']['format'], 'azure2021')

    def test_invalid_keepalive_fails(self):
        """Test that an invalid keep-alive makes the run fail."""
        code = main(["--wrapper", "azure2021", "--keepalive", "0",
                     str(self.trace), str(self.output)])

        self.assertEqual(code, 1)
        self.assertFalse(self.output.exists())

    def test_wrong_argument_count(self):
        """Test that a wrong number of files is a usage error."""
        with self.assertRaises(SystemExit):
            parse_args(["--wrapper", "azure2019", str(self.trace), str(self.output)])


class TestConfigs(unittest.TestCase):
    """Test cases for configuration helpers."""

    def test_default_config(self):
        """Test the packaged defaults."""
        config = load_default_config()

        self.assertEqual(config['analysis']['keep_alive_seconds'], 60)
        self.assertEqual(config['analysis']['tolerance_ms'], 100)
        self.assertEqual(config['trace']['seed'], 123456789)

    def test_merge_configs(self):
        """Test recursive merging."""
        base = {'analysis': {'keep_alive_seconds': 60, 'tolerance_ms': 100}, 'x': 1}
        merged = merge_configs(base, {'analysis': {'tolerance_ms': 5}})

        self.assertEqual(merged, {'analysis': {'keep_alive_seconds': 60, 'tolerance_ms': 5}, 'x': 1})
        self.assertEqual(base['analysis']['tolerance_ms'], 100)

    def test_load_empty_config(self):
        """Test that an empty YAML file loads as an empty dict."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "empty.yaml"
            path.write_text("")
            self.assertEqual(load_config(str(path)), {})


class TestLogger(unittest.TestCase):
    """Test cases for setup_logger."""

    def test_no_duplicate_handlers(self):
        """Test that repeated setup keeps a single handler."""
        first = setup_logger("faastrace-test")
        second = setup_logger("faastrace-test")

        self.assertIs(first, second)
        self.assertEqual(len(second.handlers), 1)

    def test_levels(self):
        """Test level names and the verbose switch."""
        self.assertEqual(setup_logger("faastrace-level", level="WARNING").level, logging.WARNING)
        self.assertEqual(setup_logger("faastrace-level", verbose=True).level, logging.DEBUG)


if __name__ == '__main__':
    unittest.main()
