"""
All the routines to talk to the Kubernetes API.

Beware: this is NOT a general-purpose Kubernetes client. It is a set
of minimal adapters to create, read, replace, and delete the objects
by their own ``apiVersion``/``kind``/``metadata``, and to apply them
with the create-or-replace semantics of ``kubectl apply``.

The module-level functions take the context, settings, and logger explicitly;
`kubeapply.clients.k8sapi.K8sAPI` bundles them for convenience.
"""
