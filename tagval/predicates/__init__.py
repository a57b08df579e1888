"""The catalogue of rule predicates.

This package contains all the individual predicate implementations that are
dynamically discovered by the validation engine. Each module in this package
should contain one or more classes that inherit from
`tagval.core.base_predicate.BasePredicate` and set a `keyword`.
"""
