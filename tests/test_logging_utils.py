import logging

import numpy as np

from diagram_vis import Anchor, Scene, Theme, trim_line
from diagram_vis.logging_utils import debug_log_call, safe_repr


def test_safe_repr_summarises_scene_objects_and_arrays():
    assert safe_repr(Scene((10, 20))) == "Scene(size=(10.0, 20.0), crumbs=0, groups=0, layers=0)"
    assert safe_repr(Theme()) == "Theme(styles=0, variation=[])"
    assert safe_repr(np.zeros((100, 2))).startswith("ndarray(shape=(100, 2)")
    assert safe_repr(list(range(20))).endswith("... (20 items)]")


def test_debug_log_call_traces_entry_and_exit(caplog):
    logger = logging.getLogger("diagram_vis.tests")

    @debug_log_call(logger)
    def add(a, b):
        return a + b

    with caplog.at_level(logging.DEBUG, logger="diagram_vis.tests"):
        assert add(1, b=2) == 3

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0].startswith("Entering")
    assert "kwargs={b=2}" in messages[0]
    assert messages[-1].endswith("-> 3")


def test_joint_functions_are_traced(caplog):
    with caplog.at_level(logging.DEBUG, logger="diagram_vis.joint"):
        trim_line(Anchor((0.0, 0.0), 1.0), Anchor((10.0, 0.0), 1.0))

    assert any("Entering trim_line" in record.getMessage() for record in caplog.records)
