import pytest

from vlurp.core.placement import PlacementManager, check_target, count_entries
from vlurp.infrastructure.error_handler import FilesystemError, TargetCollision
from vlurp.models import PlacementState, TargetState


def populate(root, files):
    """Helper writing a mapping of relative path -> content under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


# ---- check_target / count_entries ------------------------------------------

def test_check_target_absent(tmp_path):
    status = check_target(tmp_path / 'missing')
    assert status.state is TargetState.ABSENT
    assert status.exists is False
    assert status.file_count == 0


def test_check_target_empty_directory(tmp_path):
    target = tmp_path / 'empty'
    target.mkdir()
    status = check_target(target)
    assert status.state is TargetState.EMPTY
    assert status.exists is True


def test_check_target_occupied_counts_entries(tmp_path):
    target = tmp_path / 'full'
    populate(target, {'a.txt': 'a', 'b.txt': 'b', 'c.txt': 'c'})
    status = check_target(target)
    assert status.state is TargetState.OCCUPIED
    assert status.file_count == 3


def test_check_target_regular_file_is_occupied(tmp_path):
    target = tmp_path / 'file'
    target.write_text('x')
    assert check_target(target).state is TargetState.OCCUPIED


def test_count_entries_includes_directories(tmp_path):
    populate(tmp_path / 'root', {'a/b/c.txt': 'x', 'd.txt': 'y'})
    assert count_entries(tmp_path / 'root') == 4


def test_count_entries_absent_is_zero(tmp_path):
    assert count_entries(tmp_path / 'nope') == 0


# ---- PlacementManager ------------------------------------------------------

def test_begin_on_absent_target_is_clear(tmp_path):
    manager = PlacementManager(tmp_path / 'out')
    manager.begin()
    assert manager.state is PlacementState.CLEAR


def test_begin_on_occupied_target_without_force_raises(tmp_path):
    target = tmp_path / 'out'
    populate(target, {'one': '1', 'two': '2', 'three': '3'})
    manager = PlacementManager(target)

    with pytest.raises(TargetCollision) as excinfo:
        manager.begin(force_overwrite=False)

    assert excinfo.value.file_count == 3
    assert excinfo.value.path == target.absolute()
    assert manager.state is PlacementState.FAILED


def test_begin_on_occupied_target_with_force_is_colliding(tmp_path):
    target = tmp_path / 'out'
    populate(target, {'one': '1'})
    manager = PlacementManager(target)
    manager.begin(force_overwrite=True)
    assert manager.state is PlacementState.COLLIDING


@pytest.mark.asyncio
async def test_place_copies_selected_paths_only(tmp_path):
    workspace = tmp_path / 'workspace'
    populate(workspace, {
        '.claude/x.json': '{}',
        'CLAUDE.md': '# c',
        'src/y.js': 'y',
        'docs/deep/z.md': 'z',
    })
    target = tmp_path / 'out'

    manager = PlacementManager(target, max_concurrent_copies=2)
    manager.begin()
    placed = await manager.place(workspace, ['.claude/x.json', 'CLAUDE.md'])

    assert placed == ['.claude/x.json', 'CLAUDE.md']
    assert manager.state is PlacementState.DONE
    assert (target / '.claude' / 'x.json').read_text() == '{}'
    assert (target / 'CLAUDE.md').read_text() == '# c'
    assert not (target / 'src').exists()
    assert not (target / 'docs').exists()


@pytest.mark.asyncio
async def test_place_replaces_previous_content_on_overwrite(tmp_path):
    workspace = tmp_path / 'workspace'
    populate(workspace, {'new.txt': 'new'})
    target = tmp_path / 'out'
    populate(target, {'old1': '1', 'old2': '2', 'sub/old3': '3'})

    manager = PlacementManager(target)
    manager.begin(force_overwrite=True)
    await manager.place(workspace, ['new.txt'])

    assert sorted(p.name for p in target.iterdir()) == ['new.txt']


@pytest.mark.asyncio
async def test_place_into_empty_existing_directory(tmp_path):
    workspace = tmp_path / 'workspace'
    populate(workspace, {'a.txt': 'a'})
    target = tmp_path / 'out'
    target.mkdir()

    manager = PlacementManager(target)
    manager.begin()
    await manager.place(workspace, ['a.txt'])
    assert (target / 'a.txt').read_text() == 'a'


@pytest.mark.asyncio
async def test_place_failure_leaves_target_and_no_staging(tmp_path):
    workspace = tmp_path / 'workspace'
    populate(workspace, {'a.txt': 'a'})
    target = tmp_path / 'out'
    populate(target, {'keep.txt': 'keep'})

    manager = PlacementManager(target)
    manager.begin(force_overwrite=True)

    with pytest.raises(FilesystemError):
        await manager.place(workspace, ['a.txt', 'missing.txt'])

    assert manager.state is PlacementState.FAILED
    assert (target / 'keep.txt').read_text() == 'keep'
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith('.vlurp-stage-')] == []


@pytest.mark.asyncio
async def test_place_requires_begin(tmp_path):
    manager = PlacementManager(tmp_path / 'out')
    with pytest.raises(RuntimeError):
        await manager.place(tmp_path, [])


@pytest.mark.asyncio
async def test_place_shared_parents_created_concurrently(tmp_path):
    workspace = tmp_path / 'workspace'
    files = {f'shared/dir/file{i}.txt': str(i) for i in range(40)}
    populate(workspace, files)
    target = tmp_path / 'out'

    manager = PlacementManager(target, max_concurrent_copies=16)
    manager.begin()
    await manager.place(workspace, sorted(files))

    assert len(list((target / 'shared' / 'dir').iterdir())) == 40


@pytest.mark.asyncio
async def test_place_unusable_parent_raises_filesystem_error(tmp_path):
    workspace = tmp_path / 'workspace'
    populate(workspace, {'a.txt': 'a'})
    target = tmp_path / 'parent' / 'out'

    manager = PlacementManager(target)
    manager.begin()
    (tmp_path / 'parent').write_text('not a directory')

    with pytest.raises(FilesystemError):
        await manager.place(workspace, ['a.txt'])

    assert manager.state is PlacementState.FAILED
    assert (tmp_path / 'parent').read_text() == 'not a directory'
