import asyncio
from unittest.mock import patch

import pytest

from vlurp.infrastructure.scratch import random_suffix, remove_quietly, scratch_path


def test_random_suffix_is_sixteen_hex_chars():
    token = random_suffix()
    assert len(token) == 16
    int(token, 16)


def test_scratch_path_uses_prefix_suffix_and_parent(tmp_path):
    path = scratch_path('vlurp-', '.tar.gz', tmp_path)
    assert path.parent == tmp_path
    assert path.name.startswith('vlurp-')
    assert path.name.endswith('.tar.gz')
    assert not path.exists()


def test_scratch_path_defaults_to_system_temp(scratch_dir):
    assert scratch_path('vlurp-extract-').parent == scratch_dir


@pytest.mark.asyncio
async def test_no_collision_across_parallel_invocations(tmp_path):
    async def make():
        await asyncio.sleep(0)
        return scratch_path('vlurp-', '.tar.gz', tmp_path)

    paths = await asyncio.gather(*(make() for _ in range(1000)))
    assert len(set(paths)) == 1000


def test_remove_quietly_handles_files_dirs_and_missing(tmp_path):
    file_path = tmp_path / 'f.tar.gz'
    file_path.write_bytes(b'x')
    dir_path = tmp_path / 'd'
    (dir_path / 'nested').mkdir(parents=True)
    (dir_path / 'nested' / 'x').write_text('x')

    assert remove_quietly(file_path) is True
    assert remove_quietly(dir_path) is True
    assert remove_quietly(tmp_path / 'missing') is True
    assert remove_quietly(None) is True
    assert not file_path.exists()
    assert not dir_path.exists()


def test_remove_quietly_logs_instead_of_raising(tmp_path):
    dir_path = tmp_path / 'd'
    dir_path.mkdir()

    with patch('vlurp.infrastructure.scratch.shutil.rmtree', side_effect=PermissionError('denied')), \
         patch('vlurp.infrastructure.scratch.logger') as mock_logger:
        assert remove_quietly(dir_path) is False
        mock_logger.warning.assert_called_once()
