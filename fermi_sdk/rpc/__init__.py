from fermi_sdk.rpc.client import RpcClient

__all__ = ["RpcClient"]
