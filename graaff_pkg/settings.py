#!/usr/bin/env python3
"""
Settings loader for the Graaff blog generator.
Supports configuration from graaff.yml, graaff.yaml, or graaff.json files.
"""

import os
import json
import yaml
from typing import Dict, Any, Optional


class GraaffSettings:
    """Load and manage Graaff configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'subfolder': 'posts',
        'outfolder': 'output',
        'layoutfolder': 'layouts',
        'template': 'base.html',
        'post': 'post.html',
        'overview': 'overview.html',
        'index': 'index.html',
        'overviewtitle': 'Index',
        'truncate': 1,
        'separator': '-----',
        'config': '',
        'configfile': 'variables.conf',
        'strict': False,
        'log_dir': None
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['graaff.yml', 'graaff.yaml', 'graaff.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if loaded_settings:
                unknown = sorted(set(loaded_settings) - set(self.DEFAULT_SETTINGS))
                if unknown:
                    raise ValueError(f"Unknown settings in {config_file}: {', '.join(unknown)}")
                # Merge with defaults, giving preference to loaded settings
                self.settings.update(loaded_settings)
                print(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    data = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    data = json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")
        return data

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'graaff.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        if os.path.exists(config_path):
            print(f"Configuration file already exists: {filename}")
            return config_path

        with open(config_path, 'w', encoding='utf-8') as f:
            if file_format in ['yml', 'yaml']:
                # Custom YAML output with comments
                f.write("# Graaff Configuration File\n")
                f.write("# Command-line flags override these values\n\n")
                f.write("# Folders\n")
                f.write("subfolder: posts\n")
                f.write("outfolder: output\n")
                f.write("layoutfolder: layouts\n\n")
                f.write("# Layouts\n")
                f.write("template: base.html\n")
                f.write("post: post.html\n")
                f.write("overview: overview.html\n\n")
                f.write("# Overview page\n")
                f.write("index: index.html\n")
                f.write("overviewtitle: Index\n")
                f.write("truncate: 1  # paragraphs per abstract\n\n")
                f.write("# Posts\n")
                f.write("separator: '-----'\n")
                f.write("configfile: variables.conf\n")
                f.write("strict: false\n")
            elif file_format == 'json':
                sample_config = {k: v for k, v in self.DEFAULT_SETTINGS.items() if v is not None}
                json.dump(sample_config, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {file_format}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None and key in merged:
                merged[key] = value

        return merged
