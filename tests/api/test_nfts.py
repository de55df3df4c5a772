from solflow_api.services.metaplex import metadata_address

RPC = "https://rpc.test"
OWNER = "So11111111111111111111111111111111111111112"
NFT_MINT = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
BARE_MINT = "11111111111111111111111111111111"
FUNGIBLE_MINT = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"


def _holding(mint, amount, decimals=0):
    return {
        "pubkey": f"ata-{amount}",
        "account": {
            "data": {
                "program": "spl-token",
                "parsed": {
                    "type": "account",
                    "info": {"mint": mint, "owner": OWNER, "tokenAmount": {"amount": amount, "decimals": decimals}},
                },
            },
        },
    }


def test_by_owner_lists_single_unit_holdings_with_metadata(client, rpc_node, metadata):
    build, account = metadata
    rpc_node.results["getTokenAccountsByOwner"] = {
        "context": {"slot": 1},
        "value": [
            _holding(NFT_MINT, "1"),
            _holding(FUNGIBLE_MINT, "500000", decimals=6),
            _holding(FUNGIBLE_MINT, "1", decimals=6),
            _holding(BARE_MINT, "1"),
        ],
    }
    rpc_node.results["getMultipleAccounts"] = {
        "context": {"slot": 1},
        "value": [account(build(NFT_MINT, collection=(OWNER, True))), None],
    }

    r = client.post("/api/nfts/by-owner", json={"endpoint": RPC, "owner": OWNER})
    assert r.status_code == 200, r.text
    assert r.json() == {
        "owner": OWNER,
        "nfts": [{
            "mint": NFT_MINT,
            "name": "Bag #1",
            "symbol": "BAG",
            "uri": "https://arweave.net/bag1.json",
            "sellerFeeBasisPoints": 500,
            "updateAuthority": BARE_MINT,
            "collection": OWNER,
        }],
        "total": 1,
    }
    assert rpc_node.params("getTokenAccountsByOwner")[1] == {"programId": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"}
    assert rpc_node.params("getMultipleAccounts")[0] == [metadata_address(NFT_MINT), metadata_address(BARE_MINT)]


def test_by_owner_skips_unreadable_metadata(client, rpc_node, metadata):
    build, account = metadata
    rpc_node.results["getTokenAccountsByOwner"] = {"context": {"slot": 1}, "value": [_holding(NFT_MINT, "1")]}
    rpc_node.results["getMultipleAccounts"] = {"context": {"slot": 1}, "value": [account(b"\x04\x00")]}
    r = client.post("/api/nfts/by-owner", json={"endpoint": RPC, "owner": OWNER})
    assert r.status_code == 200
    assert r.json() == {"owner": OWNER, "nfts": [], "total": 0}


def test_by_owner_without_holdings_makes_no_metadata_call(client, rpc_node):
    rpc_node.results["getTokenAccountsByOwner"] = {"context": {"slot": 1}, "value": []}
    r = client.post("/api/nfts/by-owner", json={"endpoint": RPC, "owner": OWNER})
    assert r.json() == {"owner": OWNER, "nfts": [], "total": 0}
    assert [c["method"] for c in rpc_node.calls] == ["getTokenAccountsByOwner"]


def test_by_owner_rejects_bad_owner(client, rpc_node):
    r = client.post("/api/nfts/by-owner", json={"endpoint": RPC, "owner": "nope"})
    assert r.status_code == 400
    assert rpc_node.calls == []


def test_by_owner_rpc_failure_is_400(client, rpc_node):
    rpc_node.errors["getTokenAccountsByOwner"] = "Invalid param"
    r = client.post("/api/nfts/by-owner", json={"endpoint": RPC, "owner": OWNER})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "REMOTE_SERVICE_ERROR"


def test_metadata(client, rpc_node, metadata):
    build, account = metadata
    rpc_node.results["getAccountInfo"] = {
        "context": {"slot": 1},
        "value": account(build(NFT_MINT, creators=[(OWNER, True, 100)], collection=(BARE_MINT, False))),
    }
    r = client.post("/api/nfts/metadata", json={"endpoint": RPC, "mint": NFT_MINT})
    assert r.status_code == 200, r.text
    assert r.json() == {
        "mint": NFT_MINT,
        "name": "Bag #1",
        "symbol": "BAG",
        "uri": "https://arweave.net/bag1.json",
        "sellerFeeBasisPoints": 500,
        "creators": [{"address": OWNER, "verified": True, "share": 100}],
        "collection": {"verified": False, "address": BARE_MINT},
        "updateAuthority": BARE_MINT,
        "isMutable": True,
    }
    assert rpc_node.params("getAccountInfo")[0] == metadata_address(NFT_MINT)


def test_metadata_missing_is_404(client, rpc_node):
    rpc_node.results["getAccountInfo"] = {"context": {"slot": 1}, "value": None}
    r = client.post("/api/nfts/metadata", json={"endpoint": RPC, "mint": NFT_MINT})
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "NFT metadata not found"


def test_metadata_foreign_account_is_400(client, rpc_node, metadata):
    build, account = metadata
    rpc_node.results["getAccountInfo"] = {"context": {"slot": 1}, "value": account(build(NFT_MINT), owner=OWNER)}
    r = client.post("/api/nfts/metadata", json={"endpoint": RPC, "mint": NFT_MINT})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "REMOTE_SERVICE_ERROR"


def test_metadata_requires_mint(client, rpc_node):
    r = client.post("/api/nfts/metadata", json={"endpoint": RPC})
    assert r.status_code == 400
    assert r.json()["error"]["details"][0]["path"] == "mint"
    assert rpc_node.calls == []
