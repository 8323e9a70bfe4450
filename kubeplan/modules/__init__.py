"""
kubeplan modules.

Each package exports its interface from __init__ and keeps the rest
private. The reconciler depends only on the executor and storage
protocols, so either side can be swapped without touching it.
"""
