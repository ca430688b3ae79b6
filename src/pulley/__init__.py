"""Land GitLab merge requests into a local git checkout."""
