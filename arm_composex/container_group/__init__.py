# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Container groups: co-located containers sharing their network namespace and lifecycle.
"""
