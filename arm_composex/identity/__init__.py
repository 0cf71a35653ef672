# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Managed identities: the identity block of resources and the user-assigned identity resource.
"""
