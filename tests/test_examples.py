import os
import runpy

import pytest

BASE_PATH = os.path.dirname(os.path.realpath(__file__))
EXAMPLES_DIR = os.path.join(BASE_PATH, "..", "examples")
EXAMPLE_FILES = sorted(f for f in os.listdir(EXAMPLES_DIR) if f.endswith(".py"))


@pytest.mark.parametrize("filename", EXAMPLE_FILES)
def test_examples(filename):
    runpy.run_path(os.path.join(EXAMPLES_DIR, filename))
