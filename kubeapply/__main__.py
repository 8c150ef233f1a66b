"""
CLI entry point, when used as a module: `python -m kubeapply`.

Useful for debugging in the IDEs (use the start-mode "Module", module "kubeapply").
"""
from kubeapply import cli

if __name__ == '__main__':
    cli.main()
