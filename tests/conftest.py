"""
================================================================================
PYTEST CONFIGURATION
================================================================================

Pytest configuration and shared fixtures for the entire test suite.

Global Setup:
    - TEST_MODE=1 in the environment
    - Tests run from a throwaway working directory so nothing is written
      into the project tree (configs/, outputs/logs/, state/)

Fixtures:
    - app_config: AppConfig rooted in tmp_path with a sample terms file
    - store: AcceptanceStore for app_config
    - events: shared list recording collaborator calls in order
    - make_surface: factory for scripted prompt surfaces
    - blocker: interaction blocker that records suspend/resume
    - quiet_logging (autouse): file-only logging into tmp_path

Author: TermsGate Team
================================================================================
"""
import os
import sys
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure project root is on sys.path for cli.py / prompt_agent.py
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_TEST_WORK_DIR = None
_ORIGINAL_CWD = None

SAMPLE_TERMS = "Sample Terms of Use\n\n1. Use this computer for authorized work only.\n"
FIXED_NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


def pytest_configure(config):
    """
    Switch to a temporary working directory BEFORE test modules are imported,
    so constants.BASE_DIR never points at the project tree.
    """
    global _TEST_WORK_DIR, _ORIGINAL_CWD
    os.environ['TEST_MODE'] = '1'
    os.environ.pop('TERMSGATE_CONFIG', None)

    _ORIGINAL_CWD = Path.cwd()
    _TEST_WORK_DIR = Path(tempfile.mkdtemp(prefix="termsgate_test_"))
    os.chdir(_TEST_WORK_DIR)


def pytest_unconfigure(config):
    if _ORIGINAL_CWD is not None:
        os.chdir(_ORIGINAL_CWD)
    if _TEST_WORK_DIR is not None:
        shutil.rmtree(_TEST_WORK_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def quiet_logging(tmp_path):
    from termsgate.utils.logger import set_run_context
    set_run_context('test', log_dir=tmp_path / 'logs', console=False)
    yield
    set_run_context('test', log_dir=tmp_path / 'logs', console=False)


def build_raw_config(**overrides):
    from termsgate.utils.config import default_config, _deep_merge
    return _deep_merge(default_config(), overrides)


@pytest.fixture
def raw_config():
    return build_raw_config()


@pytest.fixture
def app_config(tmp_path):
    from termsgate.utils.config import AppConfig
    (tmp_path / 'TERMS_OF_USE.md').write_text(SAMPLE_TERMS, encoding='utf-8')
    return AppConfig.from_dict(build_raw_config(), base_dir=tmp_path)


@pytest.fixture
def config_file(tmp_path):
    """A config.json under tmp_path/configs, as the installer would lay it out."""
    import json
    (tmp_path / 'TERMS_OF_USE.md').write_text(SAMPLE_TERMS, encoding='utf-8')
    path = tmp_path / 'configs' / 'config.json'
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(build_raw_config(), indent=4), encoding='utf-8')
    return path


@pytest.fixture
def events():
    return []


@pytest.fixture
def store(app_config, events):
    from termsgate.core.store import AcceptanceStore

    class RecordingStore(AcceptanceStore):
        def write(self, record):
            events.append('write')
            super().write(record)

    return RecordingStore(app_config.store_root, app_config.organization)


@pytest.fixture
def failing_store(app_config, events):
    from termsgate.core.errors import StoreError
    from termsgate.core.store import AcceptanceStore

    class FailingStore(AcceptanceStore):
        def write(self, record):
            events.append('write')
            raise StoreError("disk full")

    return FailingStore(app_config.store_root, app_config.organization)


@pytest.fixture
def make_surface(events):
    """Factory: make_surface(action, ...) scripts successive present() results.

    An action may be a UserAction, None, or an exception instance to raise.
    """
    from termsgate.ui.base import PromptSurface

    class ScriptedSurface(PromptSurface):
        def __init__(self, actions):
            self.actions = list(actions)
            self.presented = []
            self.released = 0

        def present(self, content, dismissible=False):
            events.append('present')
            self.presented.append((content, dismissible))
            action = self.actions.pop(0)
            if isinstance(action, BaseException):
                raise action
            return action

        def release(self):
            events.append('release')
            self.released += 1

    def factory(*actions):
        return ScriptedSurface(actions)

    return factory


@pytest.fixture
def blocker(events):
    from termsgate.ui.base import InteractionBlocker

    class RecordingBlocker(InteractionBlocker):
        def __init__(self):
            self.suspended = False

        def suspend(self):
            events.append('suspend')
            self.suspended = True

        def resume(self):
            events.append('resume')
            self.suspended = False

    return RecordingBlocker()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
