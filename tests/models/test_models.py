import pytest

from vlurp.models import (
    FetchConfig, FilterSpec, SourceDescriptor, SourceKind, TargetState, TargetStatus
)


# ---- FilterSpec ------------------------------------------------------------

def test_filter_spec_splits_includes_and_excludes():
    spec = FilterSpec.of(['src/**', '!src/test_*.py', '*.md', '!**/README.md'])
    assert spec.includes == ['src/**', '*.md']
    assert spec.excludes == ['src/test_*.py', '**/README.md']
    assert len(spec) == 4


def test_filter_spec_defaults():
    assert FilterSpec.default().patterns == ('.claude/**', 'CLAUDE.md')
    assert FilterSpec.markdown_default().excludes == ['**/README.md', '**/LICENSE*']
    assert not FilterSpec()


def test_filter_spec_is_read_only():
    spec = FilterSpec.of(['a'])
    with pytest.raises(AttributeError):
        spec.patterns = ('b',)


def test_filter_spec_rejects_non_strings():
    with pytest.raises(TypeError):
        FilterSpec.of(['ok', 3])


# ---- FetchConfig -----------------------------------------------------------

def test_fetch_config_defaults():
    config = FetchConfig()
    assert config.source_dir is None
    assert config.filter_spec == FilterSpec.default()
    assert config.force_overwrite is False
    assert config.user_agent == 'vlurp-cli'
    assert config.filter_at_extraction is False


def test_fetch_config_coerces_inputs(tmp_path):
    config = FetchConfig(source_dir=str(tmp_path), filter_spec=['*.py'])
    assert config.source_dir == tmp_path
    assert config.filter_spec == FilterSpec(('*.py',))


@pytest.mark.parametrize("field, value", [
    ('chunk_size', 0),
    ('timeout', -1),
    ('max_concurrent_copies', 0),
    ('user_agent', ''),
])
def test_fetch_config_rejects_bad_values(field, value):
    with pytest.raises(ValueError):
        FetchConfig(**{field: value})


# ---- SourceDescriptor / TargetStatus ---------------------------------------

def test_source_descriptor_requires_owner_and_name():
    with pytest.raises(ValueError):
        SourceDescriptor(SourceKind.GITHUB, '', 'repo', 'https://codeload.github.com/x')


def test_source_descriptor_requires_https_location():
    with pytest.raises(ValueError):
        SourceDescriptor(SourceKind.GITHUB, 'o', 'n', 'http://codeload.github.com/o/n')


def test_source_descriptor_rejects_unsafe_identifiers():
    with pytest.raises(ValueError):
        SourceDescriptor(SourceKind.GITHUB, 'o', '..', 'https://codeload.github.com/o/n')


def test_target_status_exists():
    assert TargetStatus(TargetState.ABSENT).exists is False
    assert TargetStatus(TargetState.EMPTY).exists is True
    assert TargetStatus(TargetState.OCCUPIED, 3).exists is True


def test_filter_spec_treats_bare_string_as_one_pattern():
    assert FilterSpec.of('*.md').patterns == ('*.md',)
    assert FilterSpec('!*.md').excludes == ['*.md']
    assert FetchConfig(filter_spec='*.md').filter_spec == FilterSpec(('*.md',))
