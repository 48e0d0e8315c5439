from .pass_base import PassManager, Context
