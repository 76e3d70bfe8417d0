import os
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create a directory (and its parents) if it's missing.
def ensure_directory(path: Path):
    path.mkdir(parents=True,exist_ok=True)
    return path

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path

    @staticmethod
    def build():
        # Windows keeps user data under APPDATA, everything else gets a dotfolder in the home directory.
        appdata = os.getenv("APPDATA")
        if appdata:
            data = ensure_directory(Path(appdata) / "ClockWidget")
        else:
            data = ensure_directory(Path(os.path.expanduser("~")) / ".clockwidget")

        # Folders within the data folder
        logs = ensure_directory(data / "logs")

        return ProjectPaths(
            data = data,
            logs = logs,
        )
PATHS = ProjectPaths.build()
