# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Writes the rendered templates to the local filesystem
"""

from __future__ import annotations

import json
from os import makedirs, path

from arm_composex.common.logging import LOG


class FileArtifact:
    """
    Class to handle files artifacts, such as the deployment template.

    :ivar str file_name: the name of the file, with its extension
    :ivar dict content: the content of the file
    :ivar str body: the serialized content
    :ivar str file_path: Output file path for the FileArtifact
    """

    def __init__(self, file_name: str, content: dict, output_dir: str):
        if not isinstance(content, (dict, list)):
            raise TypeError("content must be of type", (dict, list), "Got", type(content))
        self.file_name = file_name if file_name.endswith(".json") else f"{file_name}.json"
        self.content = content
        self.output_dir = output_dir
        self.file_path = path.join(output_dir, self.file_name)
        self.body = None

    def __repr__(self):
        return self.file_path

    def define_body(self) -> str:
        self.body = json.dumps(self.content, indent=2)
        return self.body

    def write(self) -> str:
        """
        Writes the file into the output directory, creating it if need be.

        :return: the path of the file
        """
        makedirs(self.output_dir, exist_ok=True)
        LOG.debug(f"Output directory {self.output_dir} ready")
        if self.body is None:
            self.define_body()
        with open(self.file_path, "w") as template_fd:
            template_fd.write(self.body)
        LOG.info(f"Template {self.file_name} written successfully at {path.abspath(self.file_path)}")
        return self.file_path
