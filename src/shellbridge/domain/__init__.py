"""Domain layer: execution modes, the CommandError taxonomy, kubeconfig and dock models.

Pure data and rules; imports nothing from the other shellbridge layers.
"""
