"""Manages the loading and validation of application configuration.

This module defines the `Config` dataclass, a typed container for the
settings shared by the command line tools: how to invoke the external
tagger, which encodings to use, where to put its temporary files, and the
log level. `load_config` reads these settings from a YAML file and falls
back to defaults for anything the file leaves out.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

import yaml

from .tagger import TreeTaggerClient


@dataclass
class Config:
    """
    A typed configuration object for the reflearn tools.

    Attributes:
        tag_command: Command line that POS-tags a file, e.g.
                     `c:/TreeTagger/bin/tag-english`.
        chunk_command: Command line that chunks a file, e.g.
                       `c:/TreeTagger/bin/chunk-english`.
        encoding: Character encoding of tagger input and output files.
        chunk_encoding: Character encoding of the chunker input file. UTF-8
                        by default regardless of `encoding`.
        temp_file_in: Temporary file handed to the tagger as input.
        temp_file_out: Temporary file the tagger writes its result to.
        log_level: Name of the logging level for the command line tools.
    """
    tag_command: str = "tag-english"
    chunk_command: str = "chunk-english"
    encoding: str = "utf-8"
    chunk_encoding: str = "utf-8"
    temp_file_in: str = "data/tempTagFileIn"
    temp_file_out: str = "data/tempTagFileOut"
    log_level: str = "INFO"

    def make_tagger(self, log: Optional[logging.Logger] = None) -> TreeTaggerClient:
        """Builds a `TreeTaggerClient` from the tagger settings."""
        return TreeTaggerClient(
            tag_command=self.tag_command,
            chunk_command=self.chunk_command,
            encoding=self.encoding,
            temp_file_in=self.temp_file_in,
            temp_file_out=self.temp_file_out,
            chunk_encoding=self.chunk_encoding,
            log=log,
        )


def load_config(path: Optional[str] = "config.yaml") -> Config:
    """
    Loads the YAML configuration file into a `Config` object.

    The tagger settings live under a `tagger` mapping; `log_level` is a
    top-level key. Missing keys keep their defaults. Passing None returns a
    default `Config` without touching the filesystem.

    Args:
        path: The path to the YAML configuration file, or None.

    Returns:
        A populated `Config` object.

    Raises:
        FileNotFoundError: If the specified file cannot be found.
        ValueError: If there is an error parsing the YAML file.
        TypeError: If the root of the YAML file or the `tagger` section is
                   not a dictionary.
    """
    if path is None:
        return Config()
    try:
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file at {path}: {e}")

    if y is None:
        y = {}
    if not isinstance(y, dict):
        raise TypeError(f"Configuration file {path} must be a dictionary.")

    tagger = y.get("tagger", {}) or {}
    if not isinstance(tagger, dict):
        raise TypeError(f"The 'tagger' section of {path} must be a dictionary.")

    defaults = Config()
    return Config(
        tag_command=str(tagger.get("tag_command", defaults.tag_command)),
        chunk_command=str(tagger.get("chunk_command", defaults.chunk_command)),
        encoding=str(tagger.get("encoding", defaults.encoding)),
        chunk_encoding=str(tagger.get("chunk_encoding", defaults.chunk_encoding)),
        temp_file_in=str(tagger.get("temp_file_in", defaults.temp_file_in)),
        temp_file_out=str(tagger.get("temp_file_out", defaults.temp_file_out)),
        log_level=str(y.get("log_level", defaults.log_level)).upper(),
    )
