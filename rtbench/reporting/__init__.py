# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Result records, ratio metrics and the final comparison table."""
