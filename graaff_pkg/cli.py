#!/usr/bin/env python3
"""
Command-line interface for Graaff - static blog generator.
"""

import os
import sys
import logging
import argparse
from importlib import resources
from typing import List, Optional

from . import __version__
from .core import Graaff
from .errors import GraaffError
from .settings import GraaffSettings


def copy_starter_tree(source, dest_dir: str, rel_path: str = '') -> None:
    """Copy packaged starter files into dest_dir, keeping files that already exist."""
    for entry in source.iterdir():
        entry_rel = os.path.join(rel_path, entry.name)
        dest_path = os.path.join(dest_dir, entry_rel)
        if entry.name.startswith('__'):
            continue
        if entry.is_dir():
            os.makedirs(dest_path, exist_ok=True)
            copy_starter_tree(entry, dest_dir, entry_rel)
        elif os.path.exists(dest_path):
            print(f"File already exists: {entry_rel}")
        else:
            with open(dest_path, 'wb') as f:
                f.write(entry.read_bytes())
            print(f"Created: {entry_rel}")


def create_starter_structure(target_dir: Optional[str] = None) -> None:
    """Create starter layouts, a sample post and a global variables file."""
    target_dir = target_dir or os.getcwd()
    copy_starter_tree(resources.files('graaff_pkg').joinpath('starter'), target_dir)

    print("\n✅ Starter structure created successfully!")
    print("\nNext steps:")
    print("1. Edit the configuration file (graaff.yml)")
    print("2. Customize the layouts in the 'layouts/' directory")
    print("3. Add your posts to 'posts/'")
    print("4. Run 'graaff' to build your site")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Graaff - Static Blog Generator')
    parser.add_argument('--subfolder', type=str,
                        help='The folder containing markdown posts')
    parser.add_argument('--outfolder', type=str,
                        help='The folder receiving the generated html')
    parser.add_argument('--layoutfolder', type=str,
                        help='The folder containing the layout/template files')
    parser.add_argument('--template', type=str,
                        help='Base layout defining how your site looks')
    parser.add_argument('--post', type=str,
                        help='Layout defining how a post looks')
    parser.add_argument('--overview', type=str,
                        help='Layout of the overview/index page')
    parser.add_argument('--index', type=str,
                        help='Filename of the overview page')
    parser.add_argument('--overviewtitle', type=str,
                        help='Title used on the overview page')
    parser.add_argument('--truncate', type=int,
                        help='Number of paragraphs of each post shown on the overview page')
    parser.add_argument('--separator', '--seperator', dest='separator', type=str,
                        help='Separator between front-matter and content')
    parser.add_argument('--config', type=str,
                        help='Comma separated list of globally available variables')
    parser.add_argument('--configfile', type=str,
                        help='Line separated file of globally available variables')
    parser.add_argument('--strict', action='store_true', default=None,
                        help='Fail on template variables that are not set')
    parser.add_argument('--log-dir', dest='log_dir', type=str,
                        help='Directory for detailed build logs')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter project')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Handle init command
    if args.init:
        settings_loader = GraaffSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")

        print("\nCreating starter project structure...")
        create_starter_structure()
        return

    try:
        # Load settings from configuration file
        settings_loader = GraaffSettings()
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {k: v for k, v in vars(args).items() if v is not None}
        final_settings = settings_loader.merge_with_args(args_dict)

        generator = Graaff(
            posts_dir=final_settings['subfolder'],
            output_dir=final_settings['outfolder'],
            layout_dir=final_settings['layoutfolder'],
            base_template=final_settings['template'],
            post_template=final_settings['post'],
            overview_template=final_settings['overview'],
            index_file=final_settings['index'],
            overview_title=final_settings['overviewtitle'],
            truncate_length=final_settings['truncate'],
            separator=final_settings['separator'],
            config=final_settings['config'],
            config_file=final_settings['configfile'],
            strict=final_settings['strict'],
            log_dir=final_settings['log_dir']
        )
        generator.build()

    except (GraaffError, OSError, ValueError) as e:
        logging.getLogger('Graaff').debug("Build failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
