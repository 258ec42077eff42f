# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Measurement side of the harness.

Subsystems:
  - runtimes: the fixed table of execution engines and their command lines
  - sampler: warm-up + timed runs reduced to one averaged number
  - matrix: runs every enabled runtime for one benchmark
"""
