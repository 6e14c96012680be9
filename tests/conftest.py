import os

import pytest

from ideasphere.model import Idea

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def make_ideas(count, prefix="idea"):
    return [
        Idea(id=f"{prefix}-{i}", phrase=f"{prefix.title()} {i}", category="Test", description=f"Description {i}")
        for i in range(count)
    ]


@pytest.fixture
def ideas():
    return make_ideas(12)
