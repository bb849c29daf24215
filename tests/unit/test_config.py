"""
Unit tests for configuration loading.
"""
import pytest
import yaml

from gitup.config import ConfigError, GitupConfig, default_config_path, load_config


def write_yaml(path, data):
    with open(path, 'w') as f:
        yaml.dump(data, f)
    return path


class TestGitupConfig:

    def test_defaults(self):
        config = GitupConfig()

        assert config.default_remote == 'origin'
        assert config.search_depth == 3
        assert config.commit_message_template == 'Auto-commit: {timestamp}'
        assert config.interactive is True
        assert config.color == 'auto'

    def test_from_yaml(self, tmp_path):
        path = write_yaml(tmp_path / 'config.yaml', {
            'default_remote': 'upstream',
            'search_depth': 2,
            'color': 'NEVER',
            'interactive': False,
            'auto_publish': True
        })

        config = GitupConfig.from_yaml(path)

        assert config.default_remote == 'upstream'
        assert config.search_depth == 2
        assert config.color == 'never'
        assert config.interactive is False
        assert config.auto_publish is True

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('')

        assert GitupConfig.from_yaml(path) == GitupConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GitupConfig.from_yaml(tmp_path / 'missing.yaml')

    def test_unknown_key(self, tmp_path):
        path = write_yaml(tmp_path / 'config.yaml', {'remote': 'origin'})

        with pytest.raises(ConfigError, match="Unknown settings"):
            GitupConfig.from_yaml(path)

    def test_non_mapping(self, tmp_path):
        path = write_yaml(tmp_path / 'config.yaml', ['origin'])

        with pytest.raises(ConfigError, match="mapping"):
            GitupConfig.from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("color: [always\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            GitupConfig.from_yaml(path)

    @pytest.mark.parametrize("settings", [
        {'search_depth': 0},
        {'search_depth': 'deep'},
        {'color': 'sometimes'},
        {'log_level': 'LOUD'},
        {'default_remote': ''},
        {'interactive': 'maybe'},
        {'commit_message_template': 'Commit {user}'},
        {'stash_message_template': ''},
        {'git_executable': ''},
        {'git_executable': None},
        {'git_executable': 5},
    ])
    def test_invalid_values(self, settings):
        with pytest.raises(ConfigError):
            GitupConfig(**settings)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            GitupConfig(search_depth=-1)

    @pytest.mark.parametrize("mode,is_tty,expected", [
        ('always', False, True),
        ('never', True, False),
        ('auto', True, True),
        ('auto', False, False),
    ])
    def test_use_color(self, mode, is_tty, expected):
        assert GitupConfig(color=mode).use_color(is_tty) is expected


class TestEnvironment:

    def test_overrides(self):
        config = GitupConfig().apply_env({
            'GITUP_REMOTE': 'mirror',
            'GITUP_SEARCH_DEPTH': '5',
            'GITUP_COLOR': 'always',
            'GITUP_LOG_LEVEL': 'debug',
            'GITUP_GIT': '/opt/git/bin/git'
        })

        assert config.default_remote == 'mirror'
        assert config.search_depth == 5
        assert config.color == 'always'
        assert config.log_level == 'DEBUG'
        assert config.git_executable == '/opt/git/bin/git'

    def test_no_color(self):
        assert GitupConfig().apply_env({'NO_COLOR': '1'}).color == 'never'

    def test_explicit_color_beats_no_color(self):
        assert GitupConfig().apply_env({'NO_COLOR': '1', 'GITUP_COLOR': 'always'}).color == 'always'

    def test_invalid_env_value(self):
        with pytest.raises(ConfigError):
            GitupConfig().apply_env({'GITUP_SEARCH_DEPTH': 'three'})


class TestLoadConfig:

    def test_defaults_without_file(self, tmp_path):
        config = load_config(environ={'XDG_CONFIG_HOME': str(tmp_path)})

        assert config == GitupConfig()

    def test_default_location(self, tmp_path):
        (tmp_path / 'gitup').mkdir()
        write_yaml(tmp_path / 'gitup' / 'config.yaml', {'search_depth': 4})

        config = load_config(environ={'XDG_CONFIG_HOME': str(tmp_path)})

        assert default_config_path({'XDG_CONFIG_HOME': str(tmp_path)}) == tmp_path / 'gitup' / 'config.yaml'
        assert config.search_depth == 4

    def test_env_file_beats_default_location(self, tmp_path):
        other = write_yaml(tmp_path / 'other.yaml', {'default_remote': 'env'})

        config = load_config(environ={'GITUP_CONFIG': str(other), 'XDG_CONFIG_HOME': str(tmp_path)})

        assert config.default_remote == 'env'

    def test_explicit_path_beats_env_file(self, tmp_path):
        explicit = write_yaml(tmp_path / 'explicit.yaml', {'default_remote': 'explicit'})
        other = write_yaml(tmp_path / 'other.yaml', {'default_remote': 'env'})

        config = load_config(explicit, environ={'GITUP_CONFIG': str(other)})

        assert config.default_remote == 'explicit'

    def test_environment_applied_over_file(self, tmp_path):
        path = write_yaml(tmp_path / 'config.yaml', {'default_remote': 'file'})

        config = load_config(path, environ={'GITUP_REMOTE': 'env'})

        assert config.default_remote == 'env'

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'nope.yaml', environ={})

    def test_home_fallback(self, tmp_path, monkeypatch):
        from pathlib import Path
        monkeypatch.setattr(Path, 'home', lambda: tmp_path)

        assert default_config_path({}) == tmp_path / '.config' / 'gitup' / 'config.yaml'
