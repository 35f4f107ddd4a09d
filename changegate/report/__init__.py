"""Decision reporting.

Modules
-------
renderer
    ``DecisionRenderer`` turns a ``Decision`` into Rich renderables: a
    summary panel, the classified change list and the decision line.
outputs
    JSON report files, CI step outputs and workflow annotations.
"""
