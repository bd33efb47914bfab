"""Command line front end for filterkit (`filterkit parse ...`)."""
