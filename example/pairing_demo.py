import asyncio
import logging

from hashconnect import (
    Metadata,
    MemoryHub,
    Transaction,
    TransactionMetadata,
    TransactionResponse,
    create_hashconnect,
)

async def main():
    # dApp and wallet in one process over the in-memory hub
    # For a real cluster: create_hashconnect(transport="zyre", peer_id="dapp")
    hub = MemoryHub()
    dapp = create_hashconnect(transport="memory", hub=hub, name="dapp", debug=True)
    wallet = create_hashconnect(transport="memory", hub=hub, name="wallet")

    dapp.events.pairing.on(lambda p: print("dApp paired with", p.metadata.name, p.account_ids))
    dapp.events.transaction_response.on(lambda r: print("dApp got response, success =", r.success))
    dapp.events.acknowledge.on(lambda a: print("dApp got ack for", a.msg_id))

    await dapp.init(Metadata(name="Demo dApp", description="Pairing demo", icon="https://dapp.example/icon.png"))
    await wallet.init(Metadata(name="Demo Wallet", description="In-process wallet", icon="https://wallet.example/icon.png"))

    state = await dapp.connect()
    pairing_string = dapp.generate_pairing_string(state, "testnet", False)
    print("pairing string:", pairing_string[:48] + "...")

    # Out of band: the wallet scans/pastes the pairing string
    pairing = wallet.decode_pairing_string(pairing_string)

    inbox = []
    wallet.events.transaction.on(inbox.append)
    await wallet.pair(pairing, ["0.0.1234"], "testnet")

    await dapp.send_transaction(state.topic, Transaction(
        topic=state.topic,
        byte_array=b"\x0a\x0b\x0c",
        metadata=TransactionMetadata(account_to_sign="0.0.1234"),
    ))

    for tx in inbox:
        print("wallet signing", tx.byte_array.hex(), "for", tx.metadata.account_to_sign)
        await wallet.send_transaction_response(tx.topic, TransactionResponse(topic=tx.topic, success=True))

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
