"""Test configuration and fixtures."""
import os

import pytest

from app import create_app


class TestConfig:
    """Test configuration."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    APP_PASSWORD = None  # Disable auth for tests
    DEFAULT_FEED_RATE = 500.0


class AuthTestConfig(TestConfig):
    """Test configuration with a password set."""
    APP_PASSWORD = 'swordfish'


# Pocketing operation: rapid over, plunge, cut, retract
POCKET_PROGRAM = """(Pocket op1)
(SETUP=Top ZO=12.5)
T3 M6
S12000 M3
G90 G94 G17 G21 G54
G0 Z5
G1 X10 Y10 F300
G1 Z-2 F100
G1 X20 Y10 F300
G1 Z5
"""

# Contour on the same setup and tool, with deeper cuts
CONTOUR_PROGRAM = """(Contour op2)
(SETUP=Top)
T3 M6
S12000 M3
G0 Z5
G1 X-5 Y0 F300
G1 Z-4 F100
G1 X-5 Y30 F300
G1 Z5
"""

DRILL_PROGRAM = """(Drill 6mm holes)
(SETUP=Top)
T3 M6
G0 Z5
G1 X5 Y5
G1 Z-3 F80
G1 Z5
"""

# Different setup and tool
BOTTOM_PROGRAM = """(Face op3)
(SETUP=Bottom)
T5 M6
G0 Z5
G1 X1 Y1 F400
G1 Z-1
"""

TOOL_DEFINITIONS = """(T3 D=6.00 FLAT END MILL)
(T5 D=3.175 BALL)
"""


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app(TestConfig)
    yield app


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def auth_client():
    """Test client for an application that requires a password."""
    return create_app(AuthTestConfig).test_client()


@pytest.fixture
def write_programs(tmp_path):
    """Write (name, text) pairs to tmp_path with increasing modification times.

    Returns the written paths in the order given.
    """
    def _write(*programs):
        paths = []
        for i, (name, text) in enumerate(programs):
            path = tmp_path / name
            path.write_text(text, encoding='utf-8')
            os.utime(path, (1_000_000 + i * 10, 1_000_000 + i * 10))
            paths.append(str(path))
        return paths
    return _write


@pytest.fixture
def sample_directory(write_programs, tmp_path):
    """A working directory with tool definitions and four operations."""
    write_programs(
        ('tools.nc', TOOL_DEFINITIONS),
        ('part op2 contour.nc', CONTOUR_PROGRAM),
        ('part op1 pocket.nc', POCKET_PROGRAM),
        ('part op4 drill.nc', DRILL_PROGRAM),
        ('part op3 face.nc', BOTTOM_PROGRAM),
    )
    return tmp_path
