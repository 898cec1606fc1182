from odhlint.core.config.loader import ConfigError, LintConfig, find_config_file, load_config

__all__ = ["ConfigError", "LintConfig", "find_config_file", "load_config"]
