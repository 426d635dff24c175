"""Translation bundles shipped with trackswitch."""
