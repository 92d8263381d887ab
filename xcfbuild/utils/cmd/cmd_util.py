#
# Copyright 2024 xcfbuild Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# exit code reported by a shell when the executable cannot be found
COMMAND_NOT_FOUND_CODE = 127

# exit code reported by a shell when the file is not executable
COMMAND_NOT_EXECUTABLE_CODE = 126


def decode_bytes(input: bytes) -> str:
    """
    Decode tool output to string.

    Attempts UTF-8 decoding first, falls back to replacing undecodable bytes
    so a corrupt log never hides the rest of the build output.

    Args:
        input: Bytes object to decode

    Returns:
        str: Decoded string
    """
    try:
        return bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        return bytes.decode(input, "UTF-8", errors="replace")


def format_command(args: List[str]) -> str:
    """Render an argument list the way it would be typed in a shell."""
    return shlex.join(args)


class CommandRunner:
    """
    Synchronous runner for external tools (xcodebuild, zip).

    Every call blocks until the child process terminates. There is no
    timeout: a stuck build is interrupted by the operator.
    """

    def run(
        self,
        args: List[str],
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Path] = None,
        log_path: Optional[Path] = None,
    ) -> Tuple[int, str]:
        """
        Execute a command.

        Args:
            args: Program and its arguments
            env: Variables added on top of the current environment
            cwd: Working directory of the child process
            log_path: When given, stdout and stderr are written to this file

        Returns:
            tuple: (exit_code, output)
                - exit_code: Integer return code (0 = success)
                - output: Contents of the log file, or "" when output was
                  passed through to the terminal
        """
        # banners printed so far must reach the terminal before the child writes to it
        sys.stdout.flush()
        sys.stderr.flush()

        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)

        if log_path is None:
            try:
                completed = subprocess.run(args, env=run_env, cwd=cwd)
            except FileNotFoundError:
                print(f"{args[0]}: command not found")
                return COMMAND_NOT_FOUND_CODE, ""
            except PermissionError:
                print(f"{args[0]}: Permission denied")
                return COMMAND_NOT_EXECUTABLE_CODE, ""
            return completed.returncode, ""

        log_path = Path(log_path)
        with open(log_path, "wb") as log_file:
            try:
                completed = subprocess.run(
                    args,
                    env=run_env,
                    cwd=cwd,
                    stdout=log_file,
                    stderr=subprocess.STDOUT,
                )
                err_code = completed.returncode
            except FileNotFoundError:
                log_file.write(f"{args[0]}: command not found\n".encode("UTF-8"))
                err_code = COMMAND_NOT_FOUND_CODE
            except PermissionError:
                log_file.write(f"{args[0]}: Permission denied\n".encode("UTF-8"))
                err_code = COMMAND_NOT_EXECUTABLE_CODE
        return err_code, decode_bytes(log_path.read_bytes())
