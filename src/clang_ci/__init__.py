"""Build, package and publish a cross-compiling LLVM/Clang toolchain."""

__version__ = "0.1.0"
