"""
The run-time: values, environments in action, and the evaluator proper.
"""
