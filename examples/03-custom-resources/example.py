"""
Custom resources are declared the same way as the built-in kinds.

Apply the CRD first: ``kubectl apply -f crd.yaml``.
"""
import asyncio

import kubecrud

# The plural name cannot be derived from the kind here.
kubecrud.register_plural('KubecrudExample', 'kcexs')


class KubecrudExample(kubecrud.NamespacedResource):
    api_version = 'kubecrud.dev/v1'
    kind = 'KubecrudExample'

    duration = kubecrud.spec_field('duration')


async def main():
    async with kubecrud.Client.kubeconfig() as client:
        obj = KubecrudExample.from_file('obj.yaml')
        await obj.save(client)
        await obj.refresh(client)
        print(obj.to_yaml())


if __name__ == '__main__':
    asyncio.run(main())
