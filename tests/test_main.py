# tests/test_main.py
import unittest
import sys
import os
import io
import glob
import tempfile
import shutil
from contextlib import redirect_stdout

# Add the repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelgrid import main as cli
from reelgrid.domain.machine.factories.engine_factory import EngineFactory
from reelgrid.infrastructure.config.loaders.yaml_loader import YamlConfigLoader, ConfigError
from reelgrid.infrastructure.config.validators.schema_validator import SchemaValidator


class TestCommandLine(unittest.TestCase):
    """Run the simulator entry point end to end."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def run_main(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = cli.main(list(argv))
        return code, out.getvalue()

    def test_default_config_runs(self):
        code, output = self.run_main("--rounds", "50", "--seed", "1")
        self.assertEqual(code, 0)
        self.assertIn("Rounds: 50", output)
        self.assertIn("grid_12x8", output)

    def test_three_reel_preset_with_reports(self):
        report_dir = os.path.join(self.temp_dir, "out")
        code, output = self.run_main(
            "--engine", "three_reel", "--rounds", "100", "--bet", "5",
            "--seed", "7", "--rng", "numpy", "--output", report_dir
        )
        self.assertEqual(code, 0)
        self.assertIn("Expected RTP: 96.00%", output)
        self.assertEqual(len(glob.glob(os.path.join(report_dir, "summary_report_*.json"))), 1)
        self.assertEqual(len(glob.glob(os.path.join(report_dir, "rounds_report_*.csv"))), 1)

    def test_missing_config(self):
        code, output = self.run_main("-c", os.path.join(self.temp_dir, "missing.yaml"))
        self.assertEqual(code, 1)
        self.assertIn("Error loading configuration", output)

    def test_missing_engine(self):
        code, _ = self.run_main("--engine", os.path.join(self.temp_dir, "missing.yaml"), "--rounds", "1")
        self.assertEqual(code, 1)

    def test_relative_engine_path(self):
        sim_path = os.path.join(self.temp_dir, "sim.yaml")
        engine_path = os.path.join(self.temp_dir, "engines", "line.yaml")
        os.makedirs(os.path.dirname(engine_path))
        with open(engine_path, 'w', encoding='utf-8') as f:
            f.write("mode: tiered\n")
        with open(sim_path, 'w', encoding='utf-8') as f:
            f.write("engine_config: engines/line.yaml\nsession:\n  bet: 1\n  max_rounds: 10\n")

        code, output = self.run_main("-c", sim_path)
        self.assertEqual(code, 0)
        self.assertIn("Engine: line", output)

    def write_config(self, text):
        sim_path = os.path.join(self.temp_dir, "sim.yaml")
        with open(sim_path, 'w', encoding='utf-8') as f:
            f.write(text)
        return sim_path

    def test_malformed_simulation_config(self):
        cases = {
            "list": "- just\n- a list\n",
            "session list": "session: [1, 2]\n",
            "bad bet": "session:\n  bet: lots\n",
            "unknown rng": "rng:\n  strategy: dice\n",
            "unknown key": "engine: three_reel\n",
        }
        for name, text in cases.items():
            with self.subTest(case=name):
                code, output = self.run_main("-c", self.write_config(text), "--rounds", "1")
                self.assertEqual(code, 1)
                self.assertIn("Error loading configuration", output)

    def test_empty_simulation_config_uses_defaults(self):
        code, output = self.run_main("-c", self.write_config(""), "--rounds", "5", "--seed", "3")
        self.assertEqual(code, 0)
        self.assertIn("Engine: grid_12x8", output)

    def test_shipped_config_matches_schema(self):
        loader = YamlConfigLoader(SchemaValidator())
        config = loader.load_file(cli.DEFAULT_CONFIG_PATH, schema_path=cli.SIMULATION_SCHEMA_PATH)
        self.assertEqual(config["session"]["bet"], 10)

    def test_overrides_reject_non_mapping_sections(self):
        args = cli.parse_arguments([])
        with self.assertRaises(ConfigError):
            cli.apply_overrides(["a", "list"], args)
        with self.assertRaises(ConfigError):
            cli.apply_overrides({"output": "results"}, args)

    def test_resolve_engine_path(self):
        config_path = os.path.join(self.temp_dir, "sim.yaml")
        self.assertEqual(cli.resolve_engine_path("grid_12x8", config_path), EngineFactory.preset_path("grid_12x8"))
        self.assertEqual(
            cli.resolve_engine_path("engines/x.yaml", config_path),
            os.path.join(self.temp_dir, "engines", "x.yaml")
        )

    def test_overrides(self):
        args = cli.parse_arguments(["--rounds", "3", "--bet", "2", "--balance", "50", "--seed", "4", "--rng", "numpy"])
        config = cli.apply_overrides({"session": {"bet": 10}}, args)
        self.assertEqual(config["session"], {"bet": 2, "max_rounds": 3, "initial_balance": 50})
        self.assertEqual(config["rng"], {"seed": 4, "strategy": "numpy"})


if __name__ == "__main__":
    unittest.main()
