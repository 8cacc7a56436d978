"""Shared test fixtures."""

from __future__ import annotations

import pytest


# One slider driving Frown on its negative half and Smile on its positive half
SMILE_JSON = '''{
  "encodingVersion": 2,
  "systemName": "smile",
  "shapes": [{"name": "Frown"}, {"name": "Smile"}],
  "progressions": [
    {"name": "SmileProg", "pairs": [[0, -1.0], [null, 0.0], [1, 1.0]], "interp": "linear"}
  ],
  "sliders": [{"name": "Smile", "prog": 0}]
}'''

# Two sliders plus the corrective that fires when both are on
COMBO_JSON = '''{
  "encodingVersion": 2,
  "systemName": "combo",
  "shapes": [{"name": "A"}, {"name": "B"}, {"name": "A_B"}],
  "progressions": [
    {"name": "AProg", "pairs": [[null, 0.0], [0, 1.0]], "interp": "linear"},
    {"name": "BProg", "pairs": [[null, 0.0], [1, 1.0]], "interp": "linear"},
    {"name": "ABProg", "pairs": [[null, 0.0], [2, 1.0]], "interp": "linear"}
  ],
  "sliders": [{"name": "A", "prog": 0}, {"name": "B", "prog": 1}],
  "combos": [{"name": "A_B", "prog": 2, "pairs": [[0, 1.0], [1, 1.0]]}]
}'''

# Three sliders with a second- and a third-order combo over them
OVERLAP_JSON = '''{
  "encodingVersion": 2,
  "systemName": "overlap",
  "shapes": [{"name": "A_B"}, {"name": "A_B_C"}],
  "progressions": [
    {"name": "Empty", "pairs": [[null, 0.0]], "interp": "linear"},
    {"name": "ABProg", "pairs": [[null, 0.0], [0, 1.0]], "interp": "linear"},
    {"name": "ABCProg", "pairs": [[null, 0.0], [1, 1.0]], "interp": "linear"}
  ],
  "sliders": [
    {"name": "A", "prog": 0}, {"name": "B", "prog": 0}, {"name": "C", "prog": 0}
  ],
  "combos": [
    {"name": "A_B", "prog": 1, "pairs": [[0, 1.0], [1, 1.0]]},
    {"name": "A_B_C", "prog": 2, "pairs": [[0, 1.0], [1, 1.0], [2, 1.0]]}
  ]
}'''

# A combo entry with half targets is a floater at the centre of the A/B square
FLOATER_JSON = '''{
  "encodingVersion": 2,
  "systemName": "floater",
  "shapes": [{"name": "Mid"}],
  "progressions": [
    {"name": "Empty", "pairs": [[null, 0.0]], "interp": "linear"},
    {"name": "MidProg", "pairs": [[null, 0.0], [0, 1.0]], "interp": "linear"}
  ],
  "sliders": [{"name": "A", "prog": 0}, {"name": "B", "prog": 0}],
  "combos": [{"name": "A_B_Mid", "prog": 1, "pairs": [[0, 0.5], [1, 0.5]]}]
}'''

# Traversal driven by slider A, scaled by slider B
TRAVERSAL_JSON = '''{
  "encodingVersion": 2,
  "systemName": "traversal",
  "shapes": [{"name": "Reach"}],
  "progressions": [
    {"name": "Empty", "pairs": [[null, 0.0]], "interp": "linear"},
    {"name": "ReachProg", "pairs": [[null, 0.0], [0, 1.0]], "interp": "linear"}
  ],
  "sliders": [{"name": "A", "prog": 0}, {"name": "B", "prog": 0}],
  "traversals": [
    {"name": "Reach", "prog": 1,
     "progressType": "Slider", "progressControl": 0,
     "multiplierType": "Slider", "multiplierControl": 1}
  ]
}'''

# Encoding version 1: positional arrays
V1_JSON = '''{
  "encodingVersion": 1,
  "systemName": "legacy",
  "shapes": ["Rest", "Blink", "Wide"],
  "progressions": [
    ["BlinkProg", [2, 0, 1], [-1.0, 0.0, 1.0], "linear"]
  ],
  "sliders": [["Blink", 0, 0]],
  "combos": []
}'''

MALFORMED_JSON = '{"encodingVersion": 2,, }'


@pytest.fixture
def smile_json() -> str:
    return SMILE_JSON


@pytest.fixture
def combo_json() -> str:
    return COMBO_JSON


@pytest.fixture
def floater_json() -> str:
    return FLOATER_JSON


@pytest.fixture
def traversal_json() -> str:
    return TRAVERSAL_JSON
