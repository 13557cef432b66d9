# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


class RangeResolutionError(RuntimeError):
    '''
    base class for all errors that abort resolving a release-range. None of them are retryable;
    each one reflects a definitive state of the repository.
    '''
    pass


class NoMatchingTagsError(RangeResolutionError):
    pass


class NoHeadError(RangeResolutionError):
    pass


class PeelError(RangeResolutionError):
    def __init__(self, msg: str, tag_name: str):
        super().__init__(msg)
        self.tag_name = tag_name


class RevwalkInitError(RangeResolutionError):
    pass


class CommitLookupError(RangeResolutionError):
    pass


class SoftResolutionError(LookupError):
    '''
    raised by default-branch lookup strategies to signal "no result". Never leaves
    `release_range.branch`.
    '''
    pass


class RemoteMissingError(SoftResolutionError):
    pass


class BranchUnresolvableError(SoftResolutionError):
    pass
