# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Web apps, with their App Service plan and optional Application Insights component.
"""
