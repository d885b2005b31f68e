import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from dbc_transmuter.core.naming import snake_case


class TestSnakeCase(unittest.TestCase):
    def test_names(self):
        cases = {
            "EngineSpeed": "engine_speed",
            "engine_speed": "engine_speed",
            "ABSStatus": "abs_status",
            "Battery Voltage 2": "battery_voltage_2",
            "Msg2Data": "msg2_data",
            "__Temp--Sensor__": "temp_sensor",
            "": "",
        }
        for name, expected in cases.items():
            with self.subTest(name=name):
                self.assertEqual(snake_case(name), expected)


if __name__ == "__main__":
    unittest.main()
