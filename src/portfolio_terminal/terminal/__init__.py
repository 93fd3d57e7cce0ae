"""
Terminal subpackage: command registry, data cache, typewriter playback, effects,
input handling and the session that ties them together.
"""
