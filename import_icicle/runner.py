"""
runner.py

Run a Python program with the import profiler switched on and capture the
trace it writes to stderr.
"""
import logging
import os
import shutil
import subprocess

logger = logging.getLogger(__name__)

PROFILE_ENV = "PYTHONPROFILEIMPORTTIME"


def is_python_shebang(path: str) -> bool:
    """True if the file starts with a `#!` line mentioning python."""
    try:
        with open(path, "rb") as f:
            first = f.readline()
    except OSError:
        return False
    return first.startswith(b"#!") and b"python" in first.lower()


def find_python_script(args):
    """
    Return the path of args[0] if it names a script with a python shebang,
    either directly or through PATH.
    """
    if not args or args[0].startswith("-"):
        return None
    candidate = args[0]
    if os.path.isfile(candidate):
        return candidate if is_python_shebang(candidate) else None
    found = shutil.which(candidate)
    if found and is_python_shebang(found):
        return found
    return None


def resolve_executable(python: str, args):
    """
    Decide what to execute. Console scripts such as `black` or `pytest` are
    run directly so their own interpreter is profiled; anything else is
    handed to `python`.
    """
    args = list(args)
    script = find_python_script(args)
    if script:
        return script, args[1:]
    return python, args


def capture_import_trace(python: str, args):
    """
    Run the command with the import profiler enabled.
    Returns (stderr_text, returncode); stdout is left attached to ours.
    """
    exe, exe_args = resolve_executable(python, args)
    env = dict(os.environ)
    env[PROFILE_ENV] = "1"
    logger.debug("running %s %s", exe, " ".join(exe_args))
    proc = subprocess.run([exe, *exe_args], env=env, stderr=subprocess.PIPE)
    text = proc.stderr.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        logger.info("command exited with status %d", proc.returncode)
    return text, proc.returncode
