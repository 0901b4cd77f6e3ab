import random

import pytest

from config import SIM_CONFIG
from models import Node


@pytest.fixture
def cfg():
    return dict(SIM_CONFIG)


@pytest.fixture
def rng():
    return random.Random(1234)


def make_node(nid, x, y, vx=0.0, vy=0.0, jammer=False, target=False):
    return Node(nid=nid, x=x, y=y, vx=vx, vy=vy, is_jammer=jammer, is_target=target)
