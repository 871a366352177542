import dataclasses

from safe_eth.eth import EthereumNetwork

from .history.exceptions import UnknownNetwork


@dataclasses.dataclass(eq=True, frozen=True)
class TxService:
    """
    Safe Transaction Service deployment, ``url`` is the root of the API (``.../api/``)
    """

    url: str
    chain_id: int

    @classmethod
    def by_chain_id(cls, chain_id: int) -> "TxService":
        """
        :param chain_id:
        :return: Known service for the chain id
        :raises UnknownNetwork: if there's no known service for the chain id
        """
        try:
            return SERVICES_BY_CHAIN_ID[chain_id]
        except KeyError as exc:
            raise UnknownNetwork(chain_id) from exc

    @classmethod
    def by_network(cls, network: EthereumNetwork) -> "TxService":
        return cls.by_chain_id(network.value)

    @classmethod
    def supports_chain_id(cls, chain_id: int) -> bool:
        return chain_id in SERVICES_BY_CHAIN_ID


URL_BY_NETWORK = {
    EthereumNetwork.MAINNET: "https://safe-transaction-mainnet.safe.global/api/",
    EthereumNetwork.GNOSIS: "https://safe-transaction-gnosis-chain.safe.global/api/",
    EthereumNetwork.ARBITRUM_ONE: "https://safe-transaction-arbitrum.safe.global/api/",
    EthereumNetwork.AVALANCHE_C_CHAIN: "https://safe-transaction-avalanche.safe.global/api/",
    EthereumNetwork.AURORA_MAINNET: "https://safe-transaction-aurora.safe.global/api/",
    EthereumNetwork.BNB_SMART_CHAIN_MAINNET: "https://safe-transaction-bsc.safe.global/api/",
    EthereumNetwork.OPTIMISM: "https://safe-transaction-optimism.safe.global/api/",
    EthereumNetwork.POLYGON: "https://safe-transaction-polygon.safe.global/api/",
    EthereumNetwork.POLYGON_ZKEVM: "https://safe-transaction-zkevm.safe.global/api/",
    EthereumNetwork.BASE: "https://safe-transaction-base.safe.global/api/",
    EthereumNetwork.SEPOLIA: "https://safe-transaction-sepolia.safe.global/api/",
    EthereumNetwork.ENERGY_WEB_CHAIN: "https://safe-transaction-ewc.safe.global/api/",
    EthereumNetwork.ENERGY_WEB_VOLTA_TESTNET: "https://safe-transaction-volta.safe.global/api/",
}

SERVICES_BY_CHAIN_ID: dict[int, TxService] = {
    network.value: TxService(url, network.value)
    for network, url in URL_BY_NETWORK.items()
}

ETHEREUM = TxService.by_network(EthereumNetwork.MAINNET)
GNOSIS_CHAIN = TxService.by_network(EthereumNetwork.GNOSIS)
SEPOLIA = TxService.by_network(EthereumNetwork.SEPOLIA)
