# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
rtbench: cross-runtime benchmark harness.

Builds every benchmark through the ts2wasm and MoonBit toolchains, runs the
artifacts under WAMR, Node.js and QuickJS, and prints a comparison table.
"""

__version__ = "0.1.0"
