from dataclasses import asdict, dataclass


@dataclass
class BPEConfig:
    vocab_size: int = 0     # target vocabulary size
    max_key: int = 0        # next id to allocate

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, d):
        return cls(vocab_size=d["vocab_size"], max_key=d["max_key"])
