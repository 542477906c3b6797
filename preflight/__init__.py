"""preflight — bootstrap the build toolchain, rebuild when stale, launch."""

__version__ = "0.1.0"
