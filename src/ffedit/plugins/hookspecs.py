from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("ffedit")


@hookspec(firstresult=True)
def finder() -> tuple[str, str]:
    """find ffmpeg and ffprobe executable"""
    ...
