'''
Release Range Resolver

Determines the set of commits a new release should be described by: all commits on the
repository's default branch since the most recent semver release-tag, following the
"compare `<tag>...<default-branch>`" semantics of hosting platforms (i.e. commits reachable from
the default branch, but not from the merge-base of tag and default branch).

The resolver only reads from the (local) repository; it never alters it.
'''
