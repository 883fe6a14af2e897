import logging
import zipfile
from pathlib import Path

from wblauncher.prompts import Prompter
from wblauncher.session import SessionContext
from wblauncher.settings import Settings, default_settings


PROJECT_INFO = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<ProjectInfo xmlns="urn:workbench:project">\n'
    '  <Property Key="ProjectName" Value="Line4"/>\n'
    '  <Property Value="{version}" Key="ProductVersion"/>\n'
    '</ProjectInfo>\n'
)


def project_info(version):
    return PROJECT_INFO.format(version=version)


class CannedPrompter(Prompter):
    """Answers prompts from queues; an empty queue means 'cancel'."""

    def __init__(self, directories=None, files=None, confirms=None):
        self.directories = list(directories or [])
        self.files = list(files or [])
        self.confirms = list(confirms or [])
        self.calls = []

    def ask_directory(self, title, message):
        self.calls.append(("directory", title))
        return self.directories.pop(0) if self.directories else None

    def ask_file(self, title, message):
        self.calls.append(("file", title))
        return self.files.pop(0) if self.files else None

    def confirm(self, title, message):
        self.calls.append(("confirm", title))
        return self.confirms.pop(0) if self.confirms else False


def make_session(prompter=None):
    sleeps = []
    messages = []
    session = SessionContext(
        prompter=prompter or CannedPrompter(),
        logger=logging.getLogger("wblauncher.tests"),
        sleep=sleeps.append,
        echo=messages.append,
    )
    session.sleeps = sleeps
    session.messages = messages
    return session


def make_settings(tmp, **overrides):
    tmp = Path(tmp)
    data = default_settings()
    data.update({
        "install_base": str(tmp / "Workbench"),
        "root_executable": str(tmp / "Workbench" / "Workbench.exe"),
        "log_path": str(tmp / "session.log"),
    })
    data.update(overrides)
    return Settings.from_dict(data)


def write_zip(path, entries):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as z:
        for name, content in entries.items():
            z.writestr(name, content)
    return path


def write_file(path, content=""):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_install(base, folder, exe="Workbench.exe"):
    return write_file(Path(base) / folder / exe, "")


class FakeProcess:
    def __init__(self, pid, name, exe="", survives_close=False):
        self.pid = pid
        self.info = {"pid": pid, "name": name, "exe": exe}
        self.survives_close = survives_close
        self.close_requested = False
        self.killed = False

    def terminate(self):
        self.close_requested = True

    def kill(self):
        self.killed = True


class FakeProcessList:
    """Stands in for psutil.process_iter / wait_procs."""

    def __init__(self, procs):
        self.procs = list(procs)
        self.waits = []

    def process_iter(self, attrs=None):
        return iter(self.procs)

    def wait_procs(self, procs, timeout=None):
        self.waits.append((list(procs), timeout))
        alive = [p for p in procs if p.survives_close and not p.killed]
        gone = [p for p in procs if p not in alive]
        for p in gone:
            if p in self.procs:
                self.procs.remove(p)
        return gone, alive

    @staticmethod
    def close(proc):
        proc.terminate()


class FakeSpawned:
    def __init__(self, rc):
        self.rc = rc

    def poll(self):
        return self.rc


class FakeSpawner:
    """Returns a process per call: None rc = still alive, int = exited."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def __call__(self, argv, cwd):
        self.calls.append((list(argv), Path(cwd)))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return FakeSpawned(result)
