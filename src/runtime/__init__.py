"""
Runtime - wiring and tick loops

Import submodules directly (runtime.performance_engine, runtime.runtime_loop);
this package stays import-light so hardware factories can use RuntimeInfo.
"""
